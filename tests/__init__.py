"""Test package for ragdesk.

Unit tests cover each client-side component in isolation; integration
tests drive whole admin and chat workflows against an in-process backend.

Structure:
    - unit/: Individual class and function tests
    - integration/: End-to-end workflow tests
    - support.py: Scripted transport and FastAPI backend stub

Leverages pytest with pytest-check for soft assertions.
"""
