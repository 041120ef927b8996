"""Pydantic models for backend payloads and client-side state.

Provides type safety and validation at the transport seam, and the
entities owned by the session engine.

Models:
    - schemas: request and response payloads of the backend API
    - state: conversation turns, staged files, stored documents, status
"""

from ragdesk.models.schemas import (
    ChatStreamRequest,
    DocumentsResponse,
    HistoryEntry,
    IngestResponse,
    PipelineDetails,
    StatusResponse,
    StreamFrame,
    TurnRole,
    UploadResponse,
)
from ragdesk.models.state import (
    ConversationTurn,
    IngestionState,
    PendingFile,
    StatusLevel,
    StatusMessage,
    StoredDocument,
    TurnStatus,
    UploadOutcome,
)

__all__ = [
    "ChatStreamRequest",
    "ConversationTurn",
    "DocumentsResponse",
    "HistoryEntry",
    "IngestResponse",
    "IngestionState",
    "PendingFile",
    "PipelineDetails",
    "StatusLevel",
    "StatusMessage",
    "StatusResponse",
    "StoredDocument",
    "StreamFrame",
    "TurnRole",
    "TurnStatus",
    "UploadOutcome",
    "UploadResponse",
]
