"""Client-side state entities owned by the session engine.

Readers outside the owning component only ever see deep copies.
"""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ragdesk.models.schemas import TurnRole


class TurnStatus(str, Enum):
    """Lifecycle of a conversation turn."""

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class ConversationTurn(BaseModel):
    """One message in the transcript.

    Attributes:
        id: Opaque identifier, unique within the transcript.
        role: Who produced the turn.
        content: Turn text; grows by appends while streaming.
        sources: Source filenames; replaced wholesale, never appended.
        status: Where the turn is in its lifecycle.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: TurnRole
    content: str = ""
    sources: list[str] = Field(default_factory=list)
    status: TurnStatus = TurnStatus.COMPLETE

    @property
    def is_open(self) -> bool:
        return self.status in (TurnStatus.PENDING, TurnStatus.STREAMING)


class PendingFile(BaseModel):
    """A file selected by the user and not yet confirmed uploaded.

    Attributes:
        local_id: Identity of the staged entry; two files with the same
            name are still distinct entries.
        name: Filename sent to the backend.
        size_bytes: Size of ``raw``.
        raw: File contents.
    """

    model_config = ConfigDict(frozen=True)

    local_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    size_bytes: int = Field(ge=0)
    raw: bytes = Field(repr=False)

    @classmethod
    def from_bytes(cls, name: str, raw: bytes) -> "PendingFile":
        return cls(name=name, size_bytes=len(raw), raw=raw)


class StoredDocument(BaseModel):
    """A document the backend reports as stored."""

    model_config = ConfigDict(frozen=True)

    filename: str
    size_bytes: int = Field(ge=0)
    extension: str = ""


class IngestionState(BaseModel):
    embeddings_ready: bool = False


class StatusLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class StatusMessage(BaseModel):
    """User-visible status line produced by a manager operation."""

    model_config = ConfigDict(frozen=True)

    text: str
    level: StatusLevel = StatusLevel.INFO


class UploadOutcome(BaseModel):
    """Result of committing the staged batch.

    Attributes:
        uploaded: Filenames the backend confirmed.
        errors: Per-file rejection messages.
        message: Summary shown to the user.
    """

    uploaded: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    message: str = ""

    @property
    def partial(self) -> bool:
        return bool(self.uploaded) and bool(self.errors)
