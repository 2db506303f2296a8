"""Unit tests for RelayConfig."""

import pytest
from pydantic import ValidationError

from ollama_chat.relay.config import RelayConfig, get_relay_config


class TestRelayConfig:
    def test_url_trailing_slash_is_stripped(self) -> None:
        config = RelayConfig(ollama_api_url="http://localhost:11434/")

        assert config.ollama_api_url == "http://localhost:11434"
        assert config.is_configured

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_url_is_unset(self, value: str | None) -> None:
        """Missing URL is accepted at construction and reported as unconfigured."""
        config = RelayConfig(ollama_api_url=value)

        assert config.ollama_api_url is None
        assert not config.is_configured

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RelayConfig(ollama_api_url="http://x", request_timeout=0)

        assert "request_timeout" in str(exc_info.value)


class TestGetRelayConfig:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OLLAMA_API_URL", "http://ollama:11434")
        monkeypatch.setenv("OLLAMA_REQUEST_TIMEOUT", "30")

        config = get_relay_config()

        assert config.ollama_api_url == "http://ollama:11434"
        assert config.request_timeout == 30.0

    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OLLAMA_API_URL", raising=False)
        monkeypatch.delenv("OLLAMA_REQUEST_TIMEOUT", raising=False)

        config = get_relay_config()

        assert config.ollama_api_url is None
        assert config.request_timeout is None

    def test_reread_on_every_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OLLAMA_API_URL", raising=False)
        assert get_relay_config().ollama_api_url is None

        monkeypatch.setenv("OLLAMA_API_URL", "http://late:11434")

        assert get_relay_config().ollama_api_url == "http://late:11434"
