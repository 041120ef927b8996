"""Process-wide singletons shared by the UI pages.

One backend client (one connection pool) serves every page. Session
contexts live in a registry keyed by browser id.
"""

import logging
from datetime import timedelta

from ragdesk.client.backend import BackendClient
from ragdesk.client.config import ClientConfig, get_client_config
from ragdesk.session.gate import AccessGate, SessionRegistry

logger = logging.getLogger(__name__)

# Module-level singleton instances
_config: ClientConfig | None = None
_backend_client: BackendClient | None = None
_access_gate: AccessGate | None = None
_session_registry: SessionRegistry | None = None


def get_config() -> ClientConfig:
    global _config
    if _config is None:
        _config = get_client_config()
    return _config


def get_backend_client() -> BackendClient:
    """Get or create the global backend client.

    Returns:
        The BackendClient instance.
    """
    global _backend_client
    if _backend_client is None:
        _backend_client = BackendClient(get_config())
        logger.info(f"Backend client targeting {get_config().api_base_url}")
    return _backend_client


async def close_backend_client() -> None:
    global _backend_client
    if _backend_client is not None:
        await _backend_client.aclose()
        _backend_client = None


def get_access_gate() -> AccessGate:
    global _access_gate
    if _access_gate is None:
        _access_gate = AccessGate(get_config().admin_passcode)
    return _access_gate


def get_session_registry() -> SessionRegistry:
    """Get or create the session registry, evicting after the configured idle time."""
    global _session_registry
    if _session_registry is None:
        _session_registry = SessionRegistry(
            max_idle=timedelta(seconds=get_config().session_idle_timeout)
        )
    return _session_registry
