"""Pipeline status mirror: chunking, models and readiness as the backend reports them."""

from ragdesk.pipeline.mirror import PipelineSnapshot, PipelineStatusMirror

__all__ = ["PipelineSnapshot", "PipelineStatusMirror"]
