"""Client configuration with environment variable loading.

Pydantic-based configuration for the backend client and the UI.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

TONES = ("Corporate", "Conversational", "Casual", "Gen Z")


class ClientConfig(BaseModel):
    """Configuration for the ragdesk client.

    Attributes:
        api_base_url: Origin of the RAG backend.
        admin_passcode: Passcode checked by the admin access gate.
        connect_timeout: Seconds allowed to establish a connection.
        request_timeout: Seconds allowed for short JSON requests.
        default_tone: Tone label preselected in the chat page.
        status_poll_interval: Seconds between pipeline status refreshes.
        session_idle_timeout: Seconds before an unused session is evicted.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Backend origin",
    )
    admin_passcode: str = Field(
        default_factory=lambda: os.getenv("ADMIN_PASSCODE", ""),
        description="Passcode for the admin page",
    )
    connect_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CONNECT_TIMEOUT", "10")),
        gt=0.0,
        description="Connection timeout in seconds",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "60")),
        gt=0.0,
        description="Timeout for non-streaming JSON requests in seconds",
    )
    default_tone: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_TONE", "Conversational"),
        description="Tone preselected for new chats",
    )
    status_poll_interval: float = Field(
        default=30.0,
        gt=0.0,
        description="Seconds between pipeline status refreshes",
    )
    session_idle_timeout: float = Field(
        default_factory=lambda: float(os.getenv("SESSION_IDLE_TIMEOUT", "3600")),
        gt=0.0,
        description="Seconds of inactivity after which a browser session is evicted",
    )

    @field_validator("api_base_url")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        """Strip whitespace and trailing slashes from the backend origin."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v

    @field_validator("default_tone")
    @classmethod
    def validate_tone(cls, v: str) -> str:
        if v not in TONES:
            raise ValueError(f"DEFAULT_TONE must be one of: {', '.join(TONES)}")
        return v


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValueError: If the base URL or tone is invalid.
    """
    return ClientConfig()
