from enum import Enum

from pydantic import BaseModel, Field, field_validator


class TurnRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class HistoryEntry(BaseModel):
    """One prior turn sent to the backend as conversation context.

    Attributes:
        role: The speaker (user or assistant).
        content: The turn text.
    """

    role: TurnRole
    content: str


class ChatStreamRequest(BaseModel):
    """Request payload for ``POST /api/chat/stream``.

    Attributes:
        question: The user's question.
        tone: Tone label for the answer (e.g. Conversational).
        history: Prior turns, oldest first.
    """

    question: str = Field(..., min_length=1)
    tone: str
    history: list[HistoryEntry] = Field(default_factory=list)

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v: str) -> str:
        """Strip whitespace from question before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class StreamFrame(BaseModel):
    """Payload of one ``data:`` frame of the chat stream.

    Attributes:
        answer: Text fragment to append to the answer, if any.
        sources: Full source list, replacing any previous one, if any.
    """

    answer: str | None = None
    sources: list[str] | None = None


class UploadedFile(BaseModel):
    filename: str
    size: int = Field(ge=0)


class UploadResponse(BaseModel):
    """Response of ``POST /api/upload``.

    Attributes:
        uploaded: Files the backend accepted and stored.
        errors: One message per rejected file.
        message: Human readable summary from the backend.
    """

    uploaded: list[UploadedFile] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    message: str = ""


class IngestResponse(BaseModel):
    """Response of ``POST /api/ingest``.

    Attributes:
        status: ``success`` when embeddings were built.
        documents_loaded: Number of documents parsed.
        chunks_created: Number of chunks embedded.
        message: Human readable summary from the backend.
    """

    status: str
    documents_loaded: int | None = None
    chunks_created: int | None = None
    message: str = ""


class DocumentItem(BaseModel):
    filename: str
    size: int = Field(ge=0)
    extension: str = ""


class DocumentsResponse(BaseModel):
    """Response of ``GET /api/documents``."""

    documents: list[DocumentItem] = Field(default_factory=list)
    has_embeddings: bool = False


class ChunkingDetails(BaseModel):
    strategy: str = ""
    size: int | None = None
    overlap: int | None = None
    total_chunks: int | None = None


class ModelDetails(BaseModel):
    embeddings: str = ""
    llm: str = ""


class DatabaseDetails(BaseModel):
    type: str = ""
    persist_directory: str = ""
    collection_name: str = ""


class CredentialStatus(BaseModel):
    """Which provider credentials the backend has. Flags only, never secrets."""

    openai_api_key: bool = False
    openrouter_api_key: bool = False


class PipelineDetails(BaseModel):
    """Response of ``GET /api/pipeline/details``.

    Attributes:
        chunking: Chunking strategy, size, overlap and total chunk count.
        models: Embedding and LLM model identifiers.
        database: Vector store descriptor.
        status: Credential presence flags.
    """

    chunking: ChunkingDetails = Field(default_factory=ChunkingDetails)
    models: ModelDetails = Field(default_factory=ModelDetails)
    database: DatabaseDetails = Field(default_factory=DatabaseDetails)
    status: CredentialStatus = Field(default_factory=CredentialStatus)


class StatusResponse(BaseModel):
    """Response of ``GET /api/status``, the backend health check."""

    api: str = ""
    uploads: int = 0
    embeddings_ready: bool = False
    google_api_key_set: bool = False
    openai_api_key_set: bool = False
