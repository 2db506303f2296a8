"""Upstream access for the Ollama chat relay.

Responsibilities:
    - Environment-backed configuration of the upstream URL
    - Classification of upstream failures into a closed set of kinds
    - Forwarding model listings and streamed chat completions over httpx

Maintains clean separation from the HTTP layer.
"""

from ollama_chat.relay.client import OllamaRelay, UpstreamStream, get_ollama_relay
from ollama_chat.relay.config import RelayConfig, get_relay_config
from ollama_chat.relay.errors import RelayError, RelayErrorKind, classify_transport_error

__all__ = [
    "OllamaRelay",
    "RelayConfig",
    "RelayError",
    "RelayErrorKind",
    "UpstreamStream",
    "classify_transport_error",
    "get_ollama_relay",
    "get_relay_config",
]
