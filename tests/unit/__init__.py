"""Unit tests for individual components in isolation.

Coverage:
    - client/: Configuration and the HTTP adapter
    - chat/: Frame decoding and stream reconciliation
    - documents/: Staging, upload, delete and ingestion
    - pipeline/ and session/: Status mirror and access gate

The backend is an httpx.MockTransport with scripted routes, so failure
and timing cases are exact and no network is used.
"""
