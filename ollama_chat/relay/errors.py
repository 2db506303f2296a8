"""Error taxonomy for the Ollama relay.

Every failure talking to the upstream service is classified once, at the
network boundary, into a closed set of kinds. Both relay handlers turn a
RelayError into the same ``{"error": ...}`` envelope.
"""

from enum import Enum

import httpx
from fastapi import status

CONFIG_MISSING_MESSAGE = "Application is not configured to connect to Ollama service."


class RelayErrorKind(str, Enum):
    """Kinds of relay failure."""

    CONFIG_MISSING = "config_missing"
    UPSTREAM_HTTP_ERROR = "upstream_http_error"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"


class RelayError(Exception):
    """Raised when the relay cannot serve a request from the upstream.

    Attributes:
        kind: Classified failure kind.
        status_code: HTTP status to return to the caller.
        message: Human-readable description for the error envelope.
    """

    def __init__(self, kind: RelayErrorKind, status_code: int, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.message = message

    @classmethod
    def config_missing(cls) -> "RelayError":
        return cls(
            RelayErrorKind.CONFIG_MISSING,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            CONFIG_MISSING_MESSAGE,
        )

    @classmethod
    def upstream_http_error(cls, status_code: int, body: str) -> "RelayError":
        return cls(
            RelayErrorKind.UPSTREAM_HTTP_ERROR,
            status_code,
            f"Ollama service error: {status_code} - {body}",
        )

    @classmethod
    def config_invalid(cls, url: str) -> "RelayError":
        return cls(
            RelayErrorKind.CONFIG_MISSING,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Application is configured with an invalid Ollama service URL: {url}",
        )

    def to_envelope(self) -> dict[str, str]:
        return {"error": self.message}


def classify_transport_error(exc: Exception, base_url: str) -> RelayError | None:
    """Map an httpx transport failure onto a RelayError.

    Args:
        exc: Exception raised while sending the upstream request.
        base_url: Upstream base URL, quoted in the message.

    Returns:
        The classified RelayError, or None when the exception is not a
        recognised transport failure and should propagate.
    """
    if isinstance(exc, httpx.TimeoutException):
        return RelayError(
            RelayErrorKind.TIMEOUT,
            status.HTTP_504_GATEWAY_TIMEOUT,
            f"Timed out waiting for Ollama service at {base_url}.",
        )
    if isinstance(exc, httpx.NetworkError):
        return RelayError(
            RelayErrorKind.CONNECTION_REFUSED,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            f"Failed to connect to Ollama service at {base_url}. "
            "Ensure the service is running and accessible.",
        )
    return None
