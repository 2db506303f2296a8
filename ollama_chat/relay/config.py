"""Relay configuration with environment variable loading.

Pydantic-based configuration for reaching the upstream Ollama service.
The upstream URL is deliberately optional here: each relay call checks it,
so a missing value surfaces as an error envelope instead of a startup crash.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _timeout_from_env() -> float | None:
    raw = os.getenv("OLLAMA_REQUEST_TIMEOUT", "").strip()
    return float(raw) if raw else None


class RelayConfig(BaseModel):
    """Configuration for the Ollama relay.

    Attributes:
        ollama_api_url: Base URL of the Ollama service (None when unset).
        request_timeout: Seconds to wait on the upstream (None waits forever).
    """

    ollama_api_url: str | None = Field(
        default_factory=lambda: os.getenv("OLLAMA_API_URL"),
        description="Base URL of the upstream Ollama service",
    )
    request_timeout: float | None = Field(
        default_factory=_timeout_from_env,
        gt=0.0,
        description="Upstream timeout in seconds (None disables it)",
    )

    @field_validator("ollama_api_url")
    @classmethod
    def normalize_url(cls, v: str | None) -> str | None:
        """Treat blank values as unset and drop a trailing slash."""
        if v is None or not v.strip():
            return None
        return v.strip().rstrip("/")

    @property
    def is_configured(self) -> bool:
        return self.ollama_api_url is not None


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Read on every call so that each relay invocation sees the current
    environment.

    Returns:
        Configured RelayConfig instance.
    """
    return RelayConfig()
