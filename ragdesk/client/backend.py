"""Async HTTP adapter for the RAG backend.

Wraps httpx with typed results and typed failures:
    - no response at all raises BackendUnreachableError
    - a non-2xx response raises ServerRejectedError carrying ``detail``
    - a 2xx body that is not the expected JSON shape raises
      ServerRejectedError with MALFORMED_RESPONSE_MESSAGE

The chat stream and ingestion have no client-side read timeout; both wait
for the backend to finish or close the connection.
"""

import logging
import mimetypes
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ragdesk.client.config import ClientConfig, get_client_config
from ragdesk.errors import BackendUnreachableError, ServerRejectedError
from ragdesk.models.schemas import (
    ChatStreamRequest,
    DocumentsResponse,
    IngestResponse,
    PipelineDetails,
    StatusResponse,
    UploadResponse,
)
from ragdesk.models.state import PendingFile

logger = logging.getLogger(__name__)

MALFORMED_RESPONSE_MESSAGE = "Malformed response from backend"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_detail(response: httpx.Response) -> str:
    """Extract the backend's ``detail`` message from an error response."""
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None

    if isinstance(detail, str) and detail:
        return detail
    if detail:
        # FastAPI validation errors carry a list of error objects
        return str(detail)
    return response.text or f"HTTP {response.status_code}"


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = _error_detail(response)
    logger.warning(
        f"{response.request.method} {response.request.url.path} "
        f"rejected with {response.status_code}: {detail}"
    )
    raise ServerRejectedError(response.status_code, detail)


def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
    """Validate a 2xx body, treating a non-JSON or wrongly shaped body as a rejection."""
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.warning(
            f"{response.request.method} {response.request.url.path} "
            f"returned a malformed {model.__name__} body: {e}"
        )
        raise ServerRejectedError(response.status_code, MALFORMED_RESPONSE_MESSAGE) from e


class BackendClient:
    """Typed client for the backend's document and chat endpoints.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport, used by tests to route
                       requests to a mock or an in-process app.
        """
        self._config = config or get_client_config()
        self._http = httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=httpx.Timeout(
                self._config.request_timeout,
                connect=self._config.connect_timeout,
            ),
            transport=transport,
        )

    @property
    def _unbounded(self) -> httpx.Timeout:
        """Timeout for calls that wait as long as the backend needs."""
        return httpx.Timeout(None, connect=self._config.connect_timeout)

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise BackendUnreachableError(f"Backend not reachable: {e}") from e

        _raise_for_status(response)
        return response

    async def upload(self, files: Iterable[PendingFile]) -> UploadResponse:
        """Upload a batch of files in one multipart request.

        Args:
            files: Staged files, sent as repeated ``files`` parts.

        Returns:
            The backend's per-file outcome.
        """
        parts = [
            (
                "files",
                (
                    f.name,
                    f.raw,
                    mimetypes.guess_type(f.name)[0] or "application/octet-stream",
                ),
            )
            for f in files
        ]
        response = await self._request("POST", "/api/upload", files=parts)
        return _parse(response, UploadResponse)

    async def ingest(self) -> IngestResponse:
        """Trigger backend ingestion. Blocks until the backend answers."""
        response = await self._request("POST", "/api/ingest", timeout=self._unbounded)
        return _parse(response, IngestResponse)

    async def list_documents(self) -> DocumentsResponse:
        response = await self._request("GET", "/api/documents")
        return _parse(response, DocumentsResponse)

    async def delete_document(self, filename: str) -> None:
        await self._request("DELETE", f"/api/documents/{quote(filename, safe='')}")

    async def pipeline_details(self) -> PipelineDetails:
        response = await self._request("GET", "/api/pipeline/details")
        return _parse(response, PipelineDetails)

    async def status(self) -> StatusResponse:
        response = await self._request("GET", "/api/status")
        return _parse(response, StatusResponse)

    @asynccontextmanager
    async def stream_chat(
        self, request: ChatStreamRequest
    ) -> AsyncIterator[AsyncIterator[str]]:
        """Open the chat stream and yield its lines.

        The connection is released when the ``async with`` block exits,
        including on cancellation.

        Args:
            request: Question, tone and prior history.

        Yields:
            An async iterator over the raw response lines.

        Raises:
            BackendUnreachableError: On connection failure, before or
                during the stream.
            ServerRejectedError: If the backend refuses the request.
        """
        try:
            async with self._http.stream(
                "POST",
                "/api/chat/stream",
                json=request.model_dump(mode="json"),
                headers={"Accept": "text/event-stream"},
                timeout=self._unbounded,
            ) as response:
                if not response.is_success:
                    await response.aread()
                    _raise_for_status(response)
                yield response.aiter_lines()
        except httpx.RequestError as e:
            logger.warning(f"Chat stream failed: {e!r}")
            raise BackendUnreachableError(f"Connection failed: {e}") from e
