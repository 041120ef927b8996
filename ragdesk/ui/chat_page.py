"""NiceGUI chat page rendering the reconciler's transcript."""

from nicegui import ui

from ragdesk.chat.reconciler import MessageStreamReconciler
from ragdesk.client.config import TONES
from ragdesk.errors import OperationRejectedError
from ragdesk.models.schemas import TurnRole
from ragdesk.models.state import ConversationTurn, TurnStatus
from ragdesk.services import get_backend_client, get_config, get_session_registry
from ragdesk.session.gate import Role
from ragdesk.ui.layout import browser_session_key, render_header


@ui.page("/chat")
def chat_page() -> None:
    """Main chat page."""
    session = get_session_registry().open(browser_session_key())
    if session.role is None:
        session.choose_role(Role.VIEWER)

    bubbles: dict[str, ui.markdown] = {}
    streaming: set[str] = set()
    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        color = "bg-indigo-500" if is_user else "bg-gray-500"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-9 h-9 rounded-full flex items-center justify-center {color}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_turn(turn: ConversationTurn) -> None:
        is_user = turn.role is TurnRole.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        if turn.status is TurnStatus.FAILED:
            bubble += " message-failed"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if turn.status is TurnStatus.PENDING:
                        with ui.row().classes("gap-1 items-center"):
                            for _ in range(3):
                                ui.element("div").classes("typing-dot")
                    bubbles[turn.id] = ui.markdown(turn.content).classes(
                        "text-sm leading-relaxed"
                    )
                if turn.sources:
                    ui.label(f"Sources: {', '.join(turn.sources)}").classes(
                        "text-[10px] text-gray-400"
                    )
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        bubbles.clear()
        messages_container.clear()
        with messages_container:
            for turn in reconciler.transcript():
                render_turn(turn)

    def on_change(turn: ConversationTurn) -> None:
        # Only re-render the whole transcript when a turn changes status;
        # streamed text updates the existing bubble in place.
        bubble = bubbles.get(turn.id)
        if bubble is not None and turn.id in streaming:
            if turn.status is TurnStatus.STREAMING:
                bubble.set_content(turn.content)
                return
            streaming.discard(turn.id)
        elif turn.status is TurnStatus.STREAMING:
            streaming.add(turn.id)
        refresh_messages()

    reconciler = MessageStreamReconciler(get_backend_client(), on_change=on_change)
    ui.context.client.on_disconnect(reconciler.cancel)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or reconciler.active:
            return

        session.touch()
        input_field.value = ""
        send_btn.disable()
        try:
            await reconciler.submit(text, tone_select.value)
        except OperationRejectedError as e:
            ui.notify(str(e), type="warning")
        finally:
            send_btn.enable()

        if reconciler.last_error:
            ui.notify(reconciler.last_error, type="negative")

    def new_chat() -> None:
        reconciler.reset()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        render_header("RAG Assistant", "smart_toy", show_back=True)

        with ui.row().classes("w-full px-5 pt-3 items-center justify-between"):
            tone_select = ui.select(list(TONES), value=get_config().default_tone).props(
                "dense outlined"
            )
            ui.button(icon="add", on_click=new_chat).props("flat round")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Ask about your documents...")
                .props("autogrow borderless dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")
