"""Per-browser session context and the admin access gate.

The gate is a placeholder-strength admission check for the admin page. It
is not a security boundary: the backend must authorize requests itself.
"""

import hmac
import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum

from ragdesk.client.backend import BackendClient
from ragdesk.documents.lifecycle import DocumentLifecycleManager
from ragdesk.errors import AccessDeniedError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "admin"
    VIEWER = "viewer"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionContext:
    """State scoped to one browsing session.

    Created at session start and cleared at logout or idle eviction. Holds
    the admission flag, the chosen role and, once admitted, the session's
    document lifecycle manager.
    """

    def __init__(self, session_id: str | None = None, now: datetime | None = None) -> None:
        self.session_id: str = session_id or str(uuid.uuid4())
        self.created_at = now or _utcnow()
        self.last_seen = self.created_at
        self.role: Role | None = None
        self.admitted: bool = False
        self.gate_error: str | None = None
        self.documents: DocumentLifecycleManager | None = None

    def touch(self, now: datetime | None = None) -> None:
        """Record activity so the session is not evicted as idle."""
        self.last_seen = now or _utcnow()

    def choose_role(self, role: Role) -> None:
        self.role = role

    def clear(self) -> None:
        """Forget everything, as on logout."""
        self.role = None
        self.admitted = False
        self.gate_error = None
        self.documents = None


class AccessGate:
    """Compares an entered passcode with the configured one.

    No lockout and no attempt counting: a failure only sets a message.
    """

    def __init__(self, passcode: str) -> None:
        self._passcode = passcode

    def admit(self, session: SessionContext, passcode: str) -> bool:
        """Try to open the gate for a session.

        Args:
            session: The session asking for admin access.
            passcode: What the user typed.

        Returns:
            True if the session is now admitted.
        """
        if not self._passcode:
            session.gate_error = "Admin access is not configured"
            logger.warning("Admin passcode is not set; gate stays closed")
            return False

        if not hmac.compare_digest(passcode.encode(), self._passcode.encode()):
            session.gate_error = "Incorrect passcode"
            logger.info(f"Rejected admin passcode for session {session.session_id[:8]}")
            return False

        session.admitted = True
        session.gate_error = None
        session.choose_role(Role.ADMIN)
        logger.info(f"Admitted session {session.session_id[:8]}")
        return True

    def document_manager(
        self, session: SessionContext, client: BackendClient
    ) -> DocumentLifecycleManager:
        """Return the session's lifecycle manager, creating it on first use.

        Raises:
            AccessDeniedError: If the session has not passed the gate.
        """
        if not session.admitted:
            raise AccessDeniedError("Admin access required")
        if session.documents is None:
            session.documents = DocumentLifecycleManager(client)
        return session.documents


class SessionRegistry:
    """Session contexts keyed by browser id.

    Sessions unused for longer than ``max_idle`` are evicted and cleared
    the next time any session is opened, so abandoned browsers do not keep
    staged file contents alive.

    Args:
        max_idle: Idle time after which a session is evicted.
        clock: Source of the current time, replaceable in tests.
    """

    def __init__(
        self,
        max_idle: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sessions: dict[str, SessionContext] = {}
        self._max_idle = max_idle
        self._clock = clock

    def open(self, key: str) -> SessionContext:
        """Get the session for a browser, starting one if needed."""
        now = self._clock()
        self.sweep(now)
        session = self._sessions.get(key)
        if session is None:
            session = SessionContext(key, now=now)
            self._sessions[key] = session
        session.touch(now)
        return session

    def sweep(self, now: datetime | None = None) -> list[str]:
        """Evict and clear every session idle for longer than ``max_idle``.

        Returns:
            Keys of the evicted sessions.
        """
        cutoff = (now or self._clock()) - self._max_idle
        expired = [key for key, s in self._sessions.items() if s.last_seen < cutoff]
        for key in expired:
            self._sessions.pop(key).clear()
        if expired:
            logger.info(f"Evicted {len(expired)} idle session(s), {len(self._sessions)} open")
        return expired

    def close(self, key: str) -> None:
        """End a session. Unknown keys are ignored."""
        session = self._sessions.pop(key, None)
        if session is not None:
            session.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, key: object) -> bool:
        return key in self._sessions
