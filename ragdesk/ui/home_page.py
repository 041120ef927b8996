"""Landing page: choose between the admin and chat experiences."""

from nicegui import ui

from ragdesk.services import get_session_registry
from ragdesk.session.gate import Role
from ragdesk.ui.layout import CUSTOM_CSS, browser_session_key


@ui.page("/")
def home_page() -> None:
    ui.add_head_html(CUSTOM_CSS)
    session = get_session_registry().open(browser_session_key())

    def enter(role: Role) -> None:
        session.choose_role(role)
        ui.navigate.to("/admin" if role is Role.ADMIN else "/chat")

    with ui.column().classes("w-full min-h-screen items-center justify-center gap-6"):
        ui.label("RAG Assistant").classes("text-4xl font-semibold")
        ui.label("Personal AI assistant powered by your documents.").classes("text-gray-500")
        with ui.row().classes("gap-6"):
            with ui.card().classes("w-72 cursor-pointer").on(
                "click", lambda: enter(Role.ADMIN)
            ):
                ui.icon("settings").classes("text-3xl text-indigo-500")
                ui.label("Admin").classes("text-lg font-semibold")
                ui.label(
                    "Upload documents, manage data, and configure the RAG pipeline"
                ).classes("text-sm text-gray-500")
            with ui.card().classes("w-72 cursor-pointer").on(
                "click", lambda: enter(Role.VIEWER)
            ):
                ui.icon("chat").classes("text-3xl text-indigo-500")
                ui.label("Chat").classes("text-lg font-semibold")
                ui.label("Ask questions about your documents").classes("text-sm text-gray-500")
