"""Document lifecycle: staged files, stored documents and ingestion readiness.

A file moves through:

    staged (PendingFile) --commit--> stored (StoredDocument) --ingest--> embedded

Staged files are local until the backend confirms them. Stored documents
are never created or removed locally: the whole set is replaced by the
backend's listing after every upload, delete and ingestion. Failures leave
local state as it was and produce a StatusMessage instead of an exception.
"""

import logging
from collections.abc import Iterable

from ragdesk.client.backend import BackendClient
from ragdesk.errors import (
    CommitInProgressError,
    IngestInProgressError,
    NoDocumentsError,
    NothingStagedError,
    OperationRejectedError,
    RagDeskError,
    ServerRejectedError,
)
from ragdesk.models.schemas import IngestResponse
from ragdesk.models.state import (
    IngestionState,
    PendingFile,
    StatusLevel,
    StatusMessage,
    StoredDocument,
    UploadOutcome,
)
from ragdesk.pipeline.mirror import PipelineStatusMirror

logger = logging.getLogger(__name__)

# Advertised to the file picker; the backend decides what it accepts.
SUPPORTED_EXTENSIONS = (".pdf", ".txt", ".md", ".text", ".markdown")

BACKEND_DOWN_MESSAGE = "Backend not reachable. Make sure the server is running."
INGEST_RUNNING_MESSAGE = "Processing documents... This may take a moment."


class DocumentLifecycleManager:
    """Owns staged files, the stored document set and ingestion state.

    Args:
        client: Backend transport.
        mirror: Pipeline mirror refreshed after deletes and ingestion.
                A private one is created if not provided.
    """

    def __init__(
        self,
        client: BackendClient,
        mirror: PipelineStatusMirror | None = None,
    ) -> None:
        self._client = client
        self._mirror = mirror or PipelineStatusMirror(client)
        self._pending: list[PendingFile] = []
        self._documents: tuple[StoredDocument, ...] = ()
        self._ingestion = IngestionState()
        self._committing = False
        self._ingesting = False
        self._deleting: set[str] = set()
        self.status: StatusMessage | None = None

    @property
    def pending(self) -> list[PendingFile]:
        return list(self._pending)

    @property
    def documents(self) -> list[StoredDocument]:
        return list(self._documents)

    @property
    def ingestion(self) -> IngestionState:
        return self._ingestion.model_copy()

    @property
    def embeddings_ready(self) -> bool:
        return self._ingestion.embeddings_ready

    @property
    def committing(self) -> bool:
        return self._committing

    @property
    def ingesting(self) -> bool:
        return self._ingesting

    @property
    def mirror(self) -> PipelineStatusMirror:
        return self._mirror

    def _report(self, text: str, level: StatusLevel) -> None:
        self.status = StatusMessage(text=text, level=level)

    def stage(self, files: Iterable[PendingFile | tuple[str, bytes]]) -> list[PendingFile]:
        """Add files to the staged batch without any network I/O.

        Staging the same name twice creates two distinct entries.

        Args:
            files: PendingFile instances or ``(name, contents)`` pairs.

        Returns:
            The newly staged entries, in order.
        """
        staged = [
            f if isinstance(f, PendingFile) else PendingFile.from_bytes(*f)
            for f in files
        ]
        self._pending.extend(staged)
        logger.debug(f"Staged {len(staged)} file(s), {len(self._pending)} pending")
        return staged

    def unstage(self, local_id: str) -> None:
        """Drop one staged entry by identity. Unknown ids are ignored."""
        self._pending = [f for f in self._pending if f.local_id != local_id]

    async def commit_staged(self) -> UploadOutcome:
        """Upload every staged file in one batch.

        Confirmed files leave the staged list; rejected files stay staged so
        the user can correct them. If the backend cannot be reached or
        refuses the whole request, nothing is unstaged. Files staged or
        unstaged while the request is in flight are left alone.

        Returns:
            The per-file outcome and its summary message.

        Raises:
            CommitInProgressError: If a commit is already running.
            NothingStagedError: If no file is staged.
        """
        if self._committing:
            raise CommitInProgressError("An upload is already in progress")
        if not self._pending:
            raise NothingStagedError("No files staged for upload")

        batch = list(self._pending)
        self._committing = True
        self._report(f"Uploading {len(batch)} file(s)...", StatusLevel.INFO)
        try:
            try:
                response = await self._client.upload(batch)
            except RagDeskError as e:
                detail = e.detail if isinstance(e, ServerRejectedError) else str(e)
                self._report(f"Upload failed: {detail}", StatusLevel.ERROR)
                await self._reload()
                return UploadOutcome(errors=[detail], message=self.status.text)

            uploaded = [u.filename for u in response.uploaded]
            if response.errors:
                confirmed = set(uploaded)
                done_ids = {f.local_id for f in batch if f.name in confirmed}
            else:
                done_ids = {f.local_id for f in batch}
            self._pending = [f for f in self._pending if f.local_id not in done_ids]

            if response.errors and uploaded:
                message = (
                    f"Uploaded {len(uploaded)} of {len(batch)} file(s). "
                    f"Rejected: {'; '.join(response.errors)}"
                )
                self._report(message, StatusLevel.ERROR)
            elif response.errors:
                message = f"Upload failed: {'; '.join(response.errors)}"
                self._report(message, StatusLevel.ERROR)
            else:
                message = response.message or f"Uploaded {len(uploaded)} file(s)"
                self._report(message, StatusLevel.SUCCESS)

            logger.info(
                f"Upload batch of {len(batch)}: {len(uploaded)} stored, "
                f"{len(response.errors)} rejected"
            )
            await self._reload()
            return UploadOutcome(uploaded=uploaded, errors=response.errors, message=message)
        finally:
            self._committing = False

    async def _reload(self) -> bool:
        """Replace the stored set with the backend's listing."""
        try:
            listing = await self._client.list_documents()
        except RagDeskError as e:
            logger.warning(f"Document listing failed: {e}")
            return False

        by_name = {
            d.filename: StoredDocument(
                filename=d.filename, size_bytes=d.size, extension=d.extension
            )
            for d in listing.documents
        }
        self._documents = tuple(by_name.values())
        self._ingestion = IngestionState(embeddings_ready=listing.has_embeddings)
        return True

    async def refresh_documents(self) -> list[StoredDocument]:
        """Re-fetch the stored document set.

        On failure the current set is kept and an error status is set.
        """
        if not await self._reload():
            self._report(BACKEND_DOWN_MESSAGE, StatusLevel.ERROR)
        return self.documents

    async def refresh_all(self) -> None:
        """Refresh documents, the pipeline snapshot and backend health, as on page load."""
        await self.refresh_documents()
        await self._mirror.poll()

    async def remove(self, filename: str) -> bool:
        """Delete a stored document on the backend.

        The local set only changes through the re-fetch that follows a
        successful delete.

        Args:
            filename: Key of the document to delete.

        Returns:
            True if the backend confirmed the delete.

        Raises:
            OperationRejectedError: If a delete of this file is already running.
        """
        if filename in self._deleting:
            raise OperationRejectedError(f"{filename} is already being deleted")

        self._deleting.add(filename)
        try:
            await self._client.delete_document(filename)
        except RagDeskError as e:
            detail = e.detail if isinstance(e, ServerRejectedError) else str(e)
            self._report(f"Failed to delete {filename}: {detail}", StatusLevel.ERROR)
            return False
        finally:
            self._deleting.discard(filename)

        logger.info(f"Deleted document: {filename}")
        self._report(f"Deleted {filename}", StatusLevel.INFO)
        await self._reload()
        await self._mirror.refresh()
        return True

    async def ingest(self) -> IngestResponse | None:
        """Ask the backend to parse and embed every stored document.

        Waits for the single response without a client-side timeout.

        Returns:
            The backend's response, or None if the request failed.

        Raises:
            IngestInProgressError: If an ingestion is already running.
            NoDocumentsError: If no document is stored.
        """
        if self._ingesting:
            raise IngestInProgressError("Ingestion is already running")
        if not self._documents:
            raise NoDocumentsError("Upload documents before ingesting")

        self._ingesting = True
        self._report(INGEST_RUNNING_MESSAGE, StatusLevel.INFO)
        try:
            try:
                response = await self._client.ingest()
            except ServerRejectedError as e:
                self._report(e.detail, StatusLevel.ERROR)
                return None
            except RagDeskError as e:
                self._report(str(e), StatusLevel.ERROR)
                return None

            if response.status != "success":
                logger.warning(f"Ingestion reported {response.status}: {response.message}")
                self._report(
                    response.message or f"Ingestion {response.status}", StatusLevel.ERROR
                )
                return response

            self._ingestion = IngestionState(embeddings_ready=True)
            self._report(response.message, StatusLevel.SUCCESS)
            logger.info(
                f"Ingestion complete: {response.documents_loaded} documents, "
                f"{response.chunks_created} chunks"
            )
            await self._mirror.refresh()
            await self._reload()
            return response
        finally:
            self._ingesting = False
