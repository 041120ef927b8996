"""Integration tests for components working together as a system.

The backend is a FastAPI app implementing the real HTTP contracts,
reached through httpx.ASGITransport. No mocks between client layers.

Coverage:
    - Stage, commit, ingest, chat and delete as one workflow
    - Rejected files and ingestion failures surfacing to the user
    - Chat history carried between turns
"""
