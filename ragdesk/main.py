"""Main application entry point.

Runs FastAPI with the NiceGUI pages mounted on the same server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point.

    Serves the client UI on PORT (default 8080); the RAG backend is
    expected at API_BASE_URL.
    """
    import uvicorn
    from nicegui import ui

    from ragdesk.app import create_app
    from ragdesk.ui import admin_page, chat_page, home_page  # noqa: F401 - Registers the pages

    app = create_app()

    ui.run_with(
        app,
        title="RAG Assistant",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "ragdesk-secret"),
    )

    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Client UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
