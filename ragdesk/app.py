"""FastAPI application hosting the NiceGUI pages.

Owns the lifecycle of the shared backend client.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ragdesk.services import close_backend_client, get_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info(f"Starting ragdesk client for backend {get_config().api_base_url}")
    yield
    await close_backend_client()
    logger.info("Shutting down ragdesk client...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="ragdesk",
        description="Document management and streaming chat client for a RAG backend.",
        version="0.1.0",
        lifespan=lifespan,
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "ragdesk"}

    return application
