"""Document lifecycle management for the RAG corpus.

Responsibilities:
    - Staging files selected by the user (pick or drag and drop)
    - Batch upload with per-file partial failure handling
    - Wholesale refresh of the stored document set
    - Delete and ingestion requests with in-progress guards
"""

from ragdesk.documents.lifecycle import SUPPORTED_EXTENSIONS, DocumentLifecycleManager

__all__ = ["SUPPORTED_EXTENSIONS", "DocumentLifecycleManager"]
