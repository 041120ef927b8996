"""Integration tests for the hosting FastAPI app and shared services."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from ragdesk import services
from ragdesk.app import create_app, lifespan


class TestHealthEndpoint:
    """Integration tests for GET /health."""

    @pytest.fixture
    async def client(self) -> AsyncGenerator[AsyncClient]:
        """Create async HTTP client with ASGI transport."""
        transport = ASGITransport(app=create_app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    async def test_health_check(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "ragdesk"}


class TestServices:
    """Tests for the process-wide singletons."""

    async def test_backend_client_is_shared_and_closed_on_shutdown(self) -> None:
        """Shutdown closes the shared client; the next call makes a fresh one."""
        app = create_app()
        first = services.get_backend_client()
        assert services.get_backend_client() is first

        async with lifespan(app):
            pass

        assert services.get_backend_client() is not first
        await services.close_backend_client()

    def test_session_registry_is_shared(self) -> None:
        assert services.get_session_registry() is services.get_session_registry()
