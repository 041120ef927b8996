"""Transport adapter for the RAG backend.

Issues multipart uploads, JSON requests and the streamed chat POST, and
turns every outcome into a typed result or a typed failure.
"""

from ragdesk.client.backend import BackendClient
from ragdesk.client.config import TONES, ClientConfig, get_client_config

__all__ = ["TONES", "BackendClient", "ClientConfig", "get_client_config"]
