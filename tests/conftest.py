"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - config: ClientConfig pointing at a fake origin
    - scripted: ScriptedBackend for MockTransport-driven tests
    - scripted_client: BackendClient wired to the scripted backend
    - backend_state: state of the FastAPI backend stub
    - backend_client: BackendClient wired to the stub over ASGITransport
"""

from collections.abc import AsyncGenerator

import httpx
import pytest

from ragdesk.client.backend import BackendClient
from ragdesk.client.config import ClientConfig
from tests.support import FakeBackendState, ScriptedBackend, create_fake_backend


@pytest.fixture
def config() -> ClientConfig:
    """Return client configuration for tests.

    Returns:
        ClientConfig with a fake origin and a known admin passcode.
    """
    return ClientConfig(
        api_base_url="http://test",
        admin_passcode="open-sesame",
        default_tone="Conversational",
    )


@pytest.fixture
def scripted() -> ScriptedBackend:
    return ScriptedBackend()


@pytest.fixture
async def scripted_client(
    config: ClientConfig, scripted: ScriptedBackend
) -> AsyncGenerator[BackendClient]:
    """Create a backend client whose requests go to the scripted backend.

    Yields:
        BackendClient over httpx.MockTransport.
    """
    async with BackendClient(config, transport=httpx.MockTransport(scripted)) as client:
        yield client


@pytest.fixture
def backend_state() -> FakeBackendState:
    return FakeBackendState()


@pytest.fixture
async def backend_client(
    config: ClientConfig, backend_state: FakeBackendState
) -> AsyncGenerator[BackendClient]:
    """Create a backend client talking to the in-process FastAPI stub.

    Yields:
        BackendClient over httpx.ASGITransport.
    """
    transport = httpx.ASGITransport(app=create_fake_backend(backend_state))
    async with BackendClient(config, transport=transport) as client:
        yield client
