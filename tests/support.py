"""Test doubles for the backend.

ScriptedBackend is an httpx.MockTransport handler with per-route scripted
responses, for precise failure and timing scenarios. create_fake_backend
builds a FastAPI app honouring the backend's HTTP contracts, for
integration tests over httpx.ASGITransport.
"""

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Response, UploadFile, status
from fastapi.responses import StreamingResponse

RouteHandler = Callable[[httpx.Request], Any]


class ScriptedBackend:
    """Routes requests by (method, path) and records every call."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], RouteHandler] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, handler: RouteHandler) -> None:
        self.routes[(method, path)] = handler

    def on_json(self, method: str, path: str, payload: Any, status_code: int = 200) -> None:
        self.on(method, path, lambda _: httpx.Response(status_code, json=payload))

    def on_error(self, method: str, path: str, exc: Exception) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise exc

        self.on(method, path, fail)

    def on_stream(self, body: bytes | AsyncIterator[bytes], status_code: int = 200) -> None:
        self.on(
            "POST",
            "/api/chat/stream",
            lambda _: httpx.Response(
                status_code, content=body, headers={"content-type": "text/event-stream"}
            ),
        )

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.calls if r.method == method and r.url.path == path)

    def last_json(self, method: str, path: str) -> Any:
        request = next(
            r for r in reversed(self.calls) if r.method == method and r.url.path == path
        )
        return json.loads(request.content)

    def __call__(self, request: httpx.Request) -> Any:
        self.calls.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        return handler(request)


def frames(*payloads: Any, done: bool = True) -> bytes:
    """Encode payloads as ``data:`` lines, strings passed through raw."""
    lines = [p if isinstance(p, str) else json.dumps(p) for p in payloads]
    if done:
        lines.append("[DONE]")
    return "".join(f"data: {line}\n" for line in lines).encode()


def listing(*names: str, has_embeddings: bool = False) -> dict[str, Any]:
    return {
        "documents": [
            {"filename": name, "size": 100, "extension": Path(name).suffix} for name in names
        ],
        "has_embeddings": has_embeddings,
    }


PIPELINE_DETAILS = {
    "chunking": {"strategy": "recursive", "size": 1000, "overlap": 200, "total_chunks": 42},
    "models": {"embeddings": "text-embedding-3-small", "llm": "gpt-4o-mini"},
    "database": {
        "type": "chroma",
        "persist_directory": "./chroma_db",
        "collection_name": "documents",
    },
    "status": {"openai_api_key": True, "openrouter_api_key": False},
}

ALLOWED_EXTENSIONS = {".pdf", ".txt", ".md", ".text", ".markdown"}


class FakeBackendState:
    """In-memory state behind the FastAPI stub."""

    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self.has_embeddings = False
        self.total_chunks = 0
        self.chat_requests: list[dict[str, Any]] = []
        self.ingest_error: str | None = None
        self.ingest_gate: asyncio.Event | None = None

    def answer_frames(self, question: str) -> list[str]:
        sources = sorted(self.documents)
        return [
            json.dumps({"answer": "You asked: "}),
            json.dumps({"answer": question}),
            json.dumps({"sources": sources}),
            "[DONE]",
        ]


def create_fake_backend(state: FakeBackendState) -> FastAPI:
    """Build an app implementing the backend's HTTP contracts."""
    app = FastAPI()

    @app.post("/api/upload")
    async def upload(files: list[UploadFile]) -> dict[str, Any]:
        uploaded: list[dict[str, Any]] = []
        errors: list[str] = []
        for file in files:
            filename = file.filename or ""
            if Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
                errors.append(f"{filename}: unsupported type")
                continue
            content = await file.read()
            state.documents[filename] = content
            uploaded.append({"filename": filename, "size": len(content)})
        return {
            "uploaded": uploaded,
            "errors": errors,
            "message": f"Uploaded {len(uploaded)} file(s)",
        }

    @app.post("/api/ingest")
    async def ingest() -> dict[str, Any]:
        if state.ingest_gate is not None:
            await state.ingest_gate.wait()
        if not state.documents:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "No documents found to ingest")
        if state.ingest_error:
            raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, state.ingest_error)
        state.has_embeddings = True
        state.total_chunks = 3 * len(state.documents)
        return {
            "status": "success",
            "documents_loaded": len(state.documents),
            "chunks_created": state.total_chunks,
            "message": f"Ingested {len(state.documents)} documents into {state.total_chunks} chunks",
        }

    @app.get("/api/documents")
    async def documents() -> dict[str, Any]:
        return {
            "documents": [
                {"filename": name, "size": len(data), "extension": Path(name).suffix}
                for name, data in state.documents.items()
            ],
            "has_embeddings": state.has_embeddings,
        }

    @app.delete("/api/documents/{filename}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_document(filename: str) -> Response:
        if filename not in state.documents:
            raise HTTPException(status.HTTP_404_NOT_FOUND, f"{filename} not found")
        del state.documents[filename]
        # Embeddings no longer match the corpus
        state.has_embeddings = False
        state.total_chunks = 0
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/api/pipeline/details")
    async def pipeline_details() -> dict[str, Any]:
        details = json.loads(json.dumps(PIPELINE_DETAILS))
        details["chunking"]["total_chunks"] = state.total_chunks
        return details

    @app.get("/api/status")
    async def backend_status() -> dict[str, Any]:
        return {
            "api": "running",
            "uploads": len(state.documents),
            "embeddings_ready": state.has_embeddings,
            "google_api_key_set": False,
            "openai_api_key_set": True,
        }

    @app.post("/api/chat/stream")
    async def chat_stream(payload: dict[str, Any]) -> StreamingResponse:
        state.chat_requests.append(payload)

        async def generate() -> AsyncIterator[str]:
            for line in state.answer_frames(payload["question"]):
                yield f"data: {line}\n"

        return StreamingResponse(generate(), media_type="text/event-stream")

    return app
