"""Read-only mirror of the backend's pipeline configuration and health.

The data is diagnostic: a failed refresh is logged and the previous
snapshot stays in place. Nothing here raises to the caller.
"""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from ragdesk.client.backend import BackendClient
from ragdesk.errors import RagDeskError
from ragdesk.models.schemas import PipelineDetails, StatusResponse

logger = logging.getLogger(__name__)


class PipelineSnapshot(BaseModel):
    """Pipeline details as last reported by the backend.

    Attributes:
        details: Chunking, models, vector store and credential flags.
        fetched_at: When the details were received.
    """

    model_config = ConfigDict(frozen=True)

    details: PipelineDetails
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PipelineStatusMirror:
    """Fetches and stores pipeline snapshots wholesale, never patches them."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client
        self._snapshot: PipelineSnapshot | None = None
        self._backend_status: StatusResponse | None = None

    @property
    def snapshot(self) -> PipelineSnapshot | None:
        return self._snapshot

    @property
    def backend_status(self) -> StatusResponse | None:
        """Last health check result, or None if the backend never answered."""
        return self._backend_status

    async def refresh(self) -> PipelineSnapshot | None:
        """Fetch the pipeline details.

        Returns:
            The new snapshot, or the previous one if the fetch failed.
        """
        try:
            details = await self._client.pipeline_details()
        except RagDeskError as e:
            logger.warning(f"Pipeline details unavailable, keeping last snapshot: {e}")
            return self._snapshot

        self._snapshot = PipelineSnapshot(details=details)
        logger.debug(f"Pipeline snapshot refreshed: {details.chunking.total_chunks} chunks")
        return self._snapshot

    async def refresh_status(self) -> StatusResponse | None:
        """Fetch backend health; keeps the last result on failure."""
        try:
            self._backend_status = await self._client.status()
        except RagDeskError as e:
            logger.warning(f"Backend status unavailable: {e}")
        return self._backend_status

    async def poll(self) -> None:
        """Refresh both the pipeline snapshot and the backend health."""
        await self.refresh()
        await self.refresh_status()
