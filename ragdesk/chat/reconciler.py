"""Conversation transcript driven by the backend's chat stream.

The reconciler owns every ConversationTurn. Each ``submit`` opens exactly
one stream and folds its frames into a single assistant placeholder:

    pending --first frame--> streaming --end of stream--> complete
       |                         |
       +----- no content --------+--------------------> failed

Only one exchange is active at a time. Every frame is applied only while
its turn still holds the active slot, so nothing lands on a turn after
``cancel()`` has released it.
"""

import asyncio
import logging
from collections.abc import Callable

from ragdesk.chat.frames import decode_frame, is_done
from ragdesk.client.backend import BackendClient
from ragdesk.errors import EmptyMessageError, ExchangeInProgressError, RagDeskError
from ragdesk.models.schemas import ChatStreamRequest, HistoryEntry, StreamFrame, TurnRole
from ragdesk.models.state import ConversationTurn, TurnStatus

logger = logging.getLogger(__name__)

WELCOME_TURN_ID = "welcome"
WELCOME_MESSAGE = "Hey! I've connected to my data sources. How can I help you today?"
FAILURE_MESSAGE = "Sorry, I encountered an error while processing your request."
CANCELLED_MESSAGE = "The response was cancelled before any text arrived."

TurnListener = Callable[[ConversationTurn], None]


class MessageStreamReconciler:
    """Owns the transcript and the single in-flight exchange.

    Args:
        client: Backend transport used to open chat streams.
        welcome: Text of the seed assistant turn, or None for no seed.
        on_change: Called with a copy of a turn every time it changes.
    """

    def __init__(
        self,
        client: BackendClient,
        *,
        welcome: str | None = WELCOME_MESSAGE,
        on_change: TurnListener | None = None,
    ) -> None:
        self._client = client
        self._welcome = welcome
        self._on_change = on_change
        self._turns: list[ConversationTurn] = []
        self._active_id: str | None = None
        self._stream_task: asyncio.Task[None] | None = None
        self.last_error: str | None = None
        self._seed()

    def _seed(self) -> None:
        if self._welcome:
            self._turns.append(
                ConversationTurn(
                    id=WELCOME_TURN_ID,
                    role=TurnRole.ASSISTANT,
                    content=self._welcome,
                )
            )

    @property
    def active(self) -> bool:
        """True while an exchange is in flight."""
        return self._active_id is not None

    @property
    def active_turn_id(self) -> str | None:
        return self._active_id

    def transcript(self) -> list[ConversationTurn]:
        """Return a snapshot of the transcript, oldest turn first."""
        return [turn.model_copy(deep=True) for turn in self._turns]

    def history(self) -> list[HistoryEntry]:
        """Prior turns sent as context: no welcome seed, no failed or open turns.

        Failed turns hold fallback error text, not a model answer, so they
        are left out of the context (see DESIGN.md, "History").
        """
        return [
            HistoryEntry(role=turn.role, content=turn.content)
            for turn in self._turns
            if turn.id != WELCOME_TURN_ID and turn.status is TurnStatus.COMPLETE
        ]

    def _find(self, turn_id: str) -> ConversationTurn | None:
        return next((t for t in self._turns if t.id == turn_id), None)

    def _owns(self, turn: ConversationTurn) -> bool:
        return self._active_id == turn.id

    def _notify(self, turn: ConversationTurn) -> None:
        if self._on_change is not None:
            self._on_change(turn.model_copy(deep=True))

    async def submit(self, text: str, tone: str) -> ConversationTurn:
        """Send a user message and stream the answer into the transcript.

        Returns once the exchange is over, whether it completed, failed or
        was cancelled.

        Args:
            text: The user's message.
            tone: Tone label forwarded to the backend.

        Returns:
            A copy of the finalized assistant turn.

        Raises:
            EmptyMessageError: If the message is blank.
            ExchangeInProgressError: If another exchange is still active.
        """
        question = text.strip()
        if not question:
            raise EmptyMessageError("Message is empty")
        if self._active_id is not None:
            raise ExchangeInProgressError("Wait for the current answer to finish")

        request = ChatStreamRequest(question=question, tone=tone, history=self.history())

        user_turn = ConversationTurn(role=TurnRole.USER, content=question)
        assistant_turn = ConversationTurn(role=TurnRole.ASSISTANT, status=TurnStatus.PENDING)
        self._turns.extend((user_turn, assistant_turn))
        self._active_id = assistant_turn.id
        self.last_error = None
        self._notify(user_turn)
        self._notify(assistant_turn)

        task = asyncio.create_task(self._consume(assistant_turn, request))
        self._stream_task = task
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            # Released through cancel(); the turn was finalized there.
        finally:
            if self._stream_task is task:
                self._stream_task = None

        return assistant_turn.model_copy(deep=True)

    async def _consume(self, turn: ConversationTurn, request: ChatStreamRequest) -> None:
        saw_done = False
        cancelled = False
        error: str | None = None
        try:
            async with self._client.stream_chat(request) as lines:
                async for line in lines:
                    if is_done(line):
                        saw_done = True
                        break
                    frame = decode_frame(line)
                    if frame is None:
                        continue
                    if not self._owns(turn):
                        logger.debug(f"Dropping frame for released turn {turn.id}")
                        return
                    self._apply(turn, frame)
        except RagDeskError as e:
            error = str(e)
            logger.warning(f"Chat stream for turn {turn.id} failed: {error}")
        except asyncio.CancelledError:
            cancelled = True
            raise
        finally:
            if self._owns(turn) and error is None and not cancelled and not saw_done:
                logger.warning(f"Chat stream for turn {turn.id} ended without [DONE]")
            self._finalize(turn, error=error, cancelled=cancelled)

    def _apply(self, turn: ConversationTurn, frame: StreamFrame) -> None:
        if frame.answer:
            turn.content += frame.answer
        if frame.sources is not None:
            turn.sources = list(frame.sources)
        if turn.status is TurnStatus.PENDING:
            turn.status = TurnStatus.STREAMING
        self._notify(turn)

    def _finalize(
        self,
        turn: ConversationTurn,
        *,
        error: str | None = None,
        cancelled: bool = False,
    ) -> None:
        if not self._owns(turn):
            return

        if turn.content:
            turn.status = TurnStatus.COMPLETE
        else:
            turn.status = TurnStatus.FAILED
            turn.content = CANCELLED_MESSAGE if cancelled else FAILURE_MESSAGE

        self._active_id = None
        self.last_error = error
        logger.info(f"Turn {turn.id} finalized as {turn.status.value}")
        self._notify(turn)

    def cancel(self) -> None:
        """Release the active exchange, if any.

        Finalizes the in-flight turn with whatever it holds, frees the slot
        and cancels the stream task so its connection is closed. The turn
        is not touched again afterwards. Safe to call from a page teardown
        handler or from a change listener.
        """
        if self._active_id is None:
            return

        turn = self._find(self._active_id)
        if turn is not None:
            self._finalize(turn, cancelled=True)
        self._active_id = None

        task = self._stream_task
        if task is not None and not task.done():
            task.cancel()

    def reset(self) -> None:
        """Start a new conversation, cancelling any active exchange."""
        self.cancel()
        self._turns.clear()
        self.last_error = None
        self._seed()
