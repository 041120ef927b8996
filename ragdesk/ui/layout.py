"""Shared page chrome: stylesheet, header bar and logout."""

from nicegui import app, ui

from ragdesk.services import get_session_registry

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-failed { border: 1px solid #fca5a5; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .drop-zone {
        border: 2px dashed #c7d2fe;
        border-radius: 12px;
        background: #f9fafb;
    }
</style>
"""


def browser_session_key() -> str:
    return app.storage.browser["id"]


def logout() -> None:
    get_session_registry().close(browser_session_key())
    ui.navigate.to("/")


def render_header(title: str, icon: str, show_back: bool = False) -> None:
    """Gradient header with optional back button and a logout button."""
    ui.add_head_html(CUSTOM_CSS)
    with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
        with ui.row().classes("items-center gap-3"):
            if show_back:
                ui.button(icon="arrow_back", on_click=lambda: ui.navigate.to("/")).props(
                    "flat round color=white"
                )
            ui.icon(icon).classes("text-white text-3xl")
            ui.label(title).classes("text-lg font-semibold text-white")
        ui.button(icon="logout", on_click=logout).props("flat round color=white")
