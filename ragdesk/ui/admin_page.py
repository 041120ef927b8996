"""NiceGUI admin page: access gate, staging, stored documents and ingestion."""

from nicegui import events, ui

from ragdesk.documents.lifecycle import (
    INGEST_RUNNING_MESSAGE,
    SUPPORTED_EXTENSIONS,
    DocumentLifecycleManager,
)
from ragdesk.errors import OperationRejectedError
from ragdesk.models.schemas import StatusResponse
from ragdesk.models.state import StatusLevel
from ragdesk.services import (
    get_access_gate,
    get_backend_client,
    get_config,
    get_session_registry,
)
from ragdesk.session.gate import SessionContext
from ragdesk.ui.layout import browser_session_key, render_header

NOTIFY_TYPES = {
    StatusLevel.SUCCESS: "positive",
    StatusLevel.ERROR: "negative",
    StatusLevel.INFO: "info",
}


def format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def file_icon(extension: str) -> str:
    if extension == ".pdf":
        return "picture_as_pdf"
    if extension in (".md", ".markdown"):
        return "article"
    return "description"


def backend_health(status: StatusResponse | None) -> str:
    if status is None:
        return "Backend: unreachable"
    embeddings = "ready" if status.embeddings_ready else "not built"
    return f"Backend: {status.api}, {status.uploads} upload(s), embeddings {embeddings}"


def render_gate(session: SessionContext) -> None:
    """Passcode form shown until the session is admitted."""

    def attempt() -> None:
        if get_access_gate().admit(session, passcode.value or ""):
            ui.navigate.reload()
        else:
            error_label.set_text(session.gate_error or "")

    with ui.card().classes("mx-auto mt-16 w-96 gap-3"):
        ui.label("Admin access").classes("text-lg font-semibold")
        passcode = ui.input("Passcode", password=True, password_toggle_button=True).on(
            "keydown.enter", attempt
        )
        error_label = ui.label(session.gate_error or "").classes("text-sm text-red-500")
        ui.button("Enter", on_click=attempt).classes("w-full")


@ui.page("/admin")
def admin_page() -> None:
    """Document management page."""
    session = get_session_registry().open(browser_session_key())
    if not session.admitted:
        render_header("Admin", "admin_panel_settings", show_back=True)
        render_gate(session)
        return

    manager: DocumentLifecycleManager = get_access_gate().document_manager(
        session, get_backend_client()
    )

    staged_container: ui.column
    documents_container: ui.column
    pipeline_container: ui.column
    status_label: ui.label
    commit_btn: ui.button
    ingest_btn: ui.button

    def show_status() -> None:
        status = manager.status
        status_label.set_text(status.text if status else "")
        if status and status.level is StatusLevel.ERROR:
            status_label.classes(replace="text-sm text-red-500")
        else:
            status_label.classes(replace="text-sm text-gray-500")

    def refresh_staged() -> None:
        staged_container.clear()
        with staged_container:
            for pending in manager.pending:
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(f"{pending.name} ({format_size(pending.size_bytes)})")
                    ui.button(
                        icon="close",
                        on_click=lambda _, local_id=pending.local_id: unstage(local_id),
                    ).props("flat round dense")
        commit_btn.set_enabled(bool(manager.pending) and not manager.committing)

    def refresh_documents() -> None:
        documents_container.clear()
        with documents_container:
            if not manager.documents:
                ui.label("No documents uploaded yet").classes("text-gray-400")
            for doc in manager.documents:
                with ui.row().classes("w-full items-center justify-between"):
                    with ui.row().classes("items-center gap-2"):
                        ui.icon(file_icon(doc.extension)).classes("text-indigo-500")
                        ui.label(doc.filename)
                        ui.label(format_size(doc.size_bytes)).classes("text-xs text-gray-400")
                    ui.button(
                        "Delete",
                        on_click=lambda _, name=doc.filename: delete(name),
                    ).props("flat dense color=negative")
            if manager.embeddings_ready:
                ui.badge("Embeddings ready", color="positive")
        ingest_btn.set_enabled(bool(manager.documents) and not manager.ingesting)

    def refresh_pipeline() -> None:
        pipeline_container.clear()
        snapshot = manager.mirror.snapshot
        with pipeline_container:
            ui.label(backend_health(manager.mirror.backend_status))
            if snapshot is None:
                ui.label("Pipeline details unavailable").classes("text-gray-400")
                return
            details = snapshot.details
            ui.label(
                f"Chunking: {details.chunking.strategy} "
                f"(size {details.chunking.size}, overlap {details.chunking.overlap}, "
                f"{details.chunking.total_chunks} chunks)"
            )
            ui.label(f"Embeddings: {details.models.embeddings}")
            ui.label(f"LLM: {details.models.llm}")
            ui.label(f"Store: {details.database.type} / {details.database.collection_name}")
            ui.label(
                f"OpenAI key: {'set' if details.status.openai_api_key else 'missing'}, "
                f"OpenRouter key: {'set' if details.status.openrouter_api_key else 'missing'}"
            )

    def refresh_all() -> None:
        show_status()
        refresh_staged()
        refresh_documents()
        refresh_pipeline()

    def unstage(local_id: str) -> None:
        manager.unstage(local_id)
        refresh_staged()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        session.touch()
        manager.stage([(e.file.name, await e.file.read())])
        refresh_staged()

    async def commit() -> None:
        session.touch()
        commit_btn.disable()
        try:
            await manager.commit_staged()
        except OperationRejectedError as e:
            ui.notify(str(e), type="warning")
        uploader.reset()
        refresh_all()

    async def delete(filename: str) -> None:
        session.touch()
        try:
            await manager.remove(filename)
        except OperationRejectedError as e:
            ui.notify(str(e), type="warning")
        refresh_all()

    async def ingest() -> None:
        session.touch()
        ingest_btn.disable()
        status_label.set_text(INGEST_RUNNING_MESSAGE)
        try:
            await manager.ingest()
        except OperationRejectedError as e:
            ui.notify(str(e), type="warning")
        refresh_all()
        if manager.status:
            ui.notify(manager.status.text, type=NOTIFY_TYPES[manager.status.level])

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto app-container gap-4 pb-6"):
        render_header("Admin", "admin_panel_settings", show_back=True)

        with ui.column().classes("w-full px-5 gap-2"):
            ui.label("Upload your documents and process them for the RAG pipeline").classes(
                "text-gray-500"
            )
            uploader = (
                ui.upload(on_upload=handle_upload, multiple=True, auto_upload=True)
                .props(f'accept="{",".join(SUPPORTED_EXTENSIONS)}" flat')
                .classes("w-full drop-zone")
            )
            staged_container = ui.column().classes("w-full gap-1")
            commit_btn = ui.button("Upload staged files", icon="cloud_upload", on_click=commit)
            status_label = ui.label("").classes("text-sm text-gray-500")

            ui.separator()
            ui.label("Uploaded Documents").classes("text-md font-semibold")
            documents_container = ui.column().classes("w-full gap-1")
            ingest_btn = ui.button("Process documents", icon="bolt", on_click=ingest)
            ui.label(
                "This will embed all uploaded documents into the vector store for querying"
            ).classes("text-xs text-gray-400")

            ui.separator()
            ui.label("Pipeline").classes("text-md font-semibold")
            pipeline_container = ui.column().classes("w-full gap-1 text-sm")

            ui.button(
                "Go to Chat", icon="chat", on_click=lambda: ui.navigate.to("/chat")
            ).props("flat").bind_visibility_from(manager, "embeddings_ready")

    async def initial_load() -> None:
        await manager.refresh_all()
        refresh_all()

    async def poll_pipeline() -> None:
        session.touch()
        await manager.mirror.poll()
        refresh_pipeline()

    refresh_all()
    ui.timer(0.1, initial_load, once=True)
    ui.timer(get_config().status_poll_interval, poll_pipeline)
