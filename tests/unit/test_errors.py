"""Unit tests for relay error classification."""

import httpx
import pytest

from ollama_chat.relay.errors import RelayError, RelayErrorKind, classify_transport_error

BASE_URL = "http://localhost:11434"


class TestClassifyTransportError:
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("[Errno 111] Connection refused"),
            httpx.ReadError("connection reset"),
        ],
    )
    def test_network_errors_are_connection_refused(self, exc: Exception) -> None:
        error = classify_transport_error(exc, BASE_URL)

        assert error is not None
        assert error.kind is RelayErrorKind.CONNECTION_REFUSED
        assert error.status_code == 503
        assert BASE_URL in error.message

    @pytest.mark.parametrize(
        "exc",
        [httpx.ConnectTimeout("timed out"), httpx.ReadTimeout("timed out")],
    )
    def test_timeouts_are_timeout(self, exc: Exception) -> None:
        error = classify_transport_error(exc, BASE_URL)

        assert error is not None
        assert error.kind is RelayErrorKind.TIMEOUT
        assert error.status_code == 504

    @pytest.mark.parametrize(
        "exc",
        [httpx.RemoteProtocolError("bad framing"), ValueError("boom")],
    )
    def test_other_errors_are_not_classified(self, exc: Exception) -> None:
        assert classify_transport_error(exc, BASE_URL) is None


class TestRelayError:
    def test_config_missing(self) -> None:
        error = RelayError.config_missing()

        assert error.kind is RelayErrorKind.CONFIG_MISSING
        assert error.status_code == 500
        assert error.to_envelope() == {
            "error": "Application is not configured to connect to Ollama service."
        }

    def test_upstream_http_error_keeps_status_and_body(self) -> None:
        error = RelayError.upstream_http_error(429, "slow down")

        assert error.kind is RelayErrorKind.UPSTREAM_HTTP_ERROR
        assert error.status_code == 429
        assert error.message == "Ollama service error: 429 - slow down"
        assert str(error) == error.message

    def test_config_invalid_is_a_configuration_error(self) -> None:
        error = RelayError.config_invalid("http://[::1")

        assert error.kind is RelayErrorKind.CONFIG_MISSING
        assert error.status_code == 500
        assert "http://[::1" in error.message
