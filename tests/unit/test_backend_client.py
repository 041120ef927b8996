"""Unit tests for the backend HTTP adapter."""

import httpx
import pytest
import pytest_check as check

from ragdesk.client.backend import MALFORMED_RESPONSE_MESSAGE, BackendClient
from ragdesk.errors import BackendUnreachableError, ServerRejectedError
from ragdesk.models.schemas import ChatStreamRequest, HistoryEntry, TurnRole
from ragdesk.models.state import PendingFile
from tests.support import ScriptedBackend, frames, listing


class TestErrorMapping:
    """Failures become typed errors carrying the backend's detail."""

    async def test_detail_string(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json("GET", "/api/documents", {"detail": "Disk full"}, status_code=500)

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.list_documents()

        check.equal(exc_info.value.status_code, 500)
        check.equal(exc_info.value.detail, "Disk full")
        check.equal(str(exc_info.value), "Disk full")

    async def test_validation_detail_is_stringified(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        """FastAPI validation errors carry a list, which is kept readable."""
        scripted.on_json(
            "POST", "/api/upload", {"detail": [{"msg": "Field required"}]}, status_code=422
        )

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.upload([])

        assert "Field required" in exc_info.value.detail

    async def test_plain_text_body(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on("GET", "/api/status", lambda _: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.status()

        assert exc_info.value.detail == "Bad Gateway"

    async def test_empty_body_falls_back_to_status_code(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on("GET", "/api/status", lambda _: httpx.Response(503))

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.status()

        assert exc_info.value.detail == "HTTP 503"

    async def test_connection_failure_is_unreachable(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_error("POST", "/api/ingest", httpx.ConnectError("refused"))

        with pytest.raises(BackendUnreachableError):
            await scripted_client.ingest()

    async def test_non_json_success_body_is_rejected(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        """A 200 HTML page is reported as a malformed response, chained to the parse error."""
        scripted.on("GET", "/api/documents", lambda _: httpx.Response(200, text="<html>"))

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.list_documents()

        check.equal(exc_info.value.status_code, 200)
        check.equal(exc_info.value.detail, MALFORMED_RESPONSE_MESSAGE)
        check.is_instance(exc_info.value.__cause__, ValueError)

    async def test_wrong_shape_success_body_is_rejected(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json("POST", "/api/ingest", ["not", "an", "object"])

        with pytest.raises(ServerRejectedError) as exc_info:
            await scripted_client.ingest()

        assert exc_info.value.detail == MALFORMED_RESPONSE_MESSAGE


class TestEndpoints:
    """Request shapes for each endpoint."""

    async def test_upload_repeats_files_field(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json(
            "POST",
            "/api/upload",
            {"uploaded": [{"filename": "a.pdf", "size": 3}], "errors": [], "message": "ok"},
        )

        response = await scripted_client.upload(
            [PendingFile.from_bytes("a.pdf", b"abc"), PendingFile.from_bytes("b.md", b"# b")]
        )

        body = scripted.calls[0].content
        check.equal(body.count(b'name="files"'), 2)
        check.is_in(b"Content-Type: application/pdf", body)
        check.is_in(b"abc", body)
        check.equal(response.uploaded[0].filename, "a.pdf")

    async def test_list_documents(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json("GET", "/api/documents", listing("a.pdf", has_embeddings=True))

        response = await scripted_client.list_documents()

        check.equal(response.documents[0].extension, ".pdf")
        check.is_true(response.has_embeddings)

    async def test_delete_quotes_filename(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        """Slashes and spaces in a filename stay inside one path segment."""
        scripted.on("DELETE", "/api/documents/a/b c.pdf", lambda _: httpx.Response(204))

        await scripted_client.delete_document("a/b c.pdf")

        assert scripted.calls[0].url.raw_path == b"/api/documents/a%2Fb%20c.pdf"

    async def test_ingest_response(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json(
            "POST",
            "/api/ingest",
            {"status": "success", "documents_loaded": 2, "chunks_created": 9, "message": "ok"},
        )

        response = await scripted_client.ingest()

        check.equal(response.status, "success")
        check.equal(response.documents_loaded, 2)
        check.equal(response.chunks_created, 9)


class TestStreamChat:
    """Tests for the streaming chat request."""

    async def test_request_body_and_lines(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_stream(frames({"answer": "Hi"}))
        request = ChatStreamRequest(
            question="hello",
            tone="Casual",
            history=[HistoryEntry(role=TurnRole.USER, content="before")],
        )

        async with scripted_client.stream_chat(request) as lines:
            received = [line async for line in lines]

        sent = scripted.last_json("POST", "/api/chat/stream")
        check.equal(
            sent,
            {
                "question": "hello",
                "tone": "Casual",
                "history": [{"role": "user", "content": "before"}],
            },
        )
        check.equal(scripted.calls[0].headers["accept"], "text/event-stream")
        check.equal(received, ['data: {"answer": "Hi"}', "data: [DONE]"])

    async def test_rejected_stream_raises_before_yield(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_json("POST", "/api/chat/stream", {"detail": "No embeddings"}, 400)
        request = ChatStreamRequest(question="q", tone="Casual")

        with pytest.raises(ServerRejectedError) as exc_info:
            async with scripted_client.stream_chat(request):
                pytest.fail("stream should not open")

        assert exc_info.value.detail == "No embeddings"

    async def test_unreachable_stream(
        self, scripted: ScriptedBackend, scripted_client: BackendClient
    ) -> None:
        scripted.on_error("POST", "/api/chat/stream", httpx.ConnectError("refused"))
        request = ChatStreamRequest(question="q", tone="Casual")

        with pytest.raises(BackendUnreachableError) as exc_info:
            async with scripted_client.stream_chat(request):
                pass

        assert "Connection failed" in str(exc_info.value)
