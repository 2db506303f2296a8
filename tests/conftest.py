"""Pytest fixtures and shared test configuration.

Fixtures:
    - app: The FastAPI relay application
    - async_client: HTTPX client bound to the app via ASGITransport
    - fake_ollama: Simulated Ollama service installed behind the relay
    - unconfigured_relay: Relay with no upstream URL, recording any I/O attempt
    - misconfigured_relay: Relay with an unparseable upstream URL
"""

import json
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable, Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from ollama_chat.api import app as relay_app
from ollama_chat.relay import OllamaRelay, RelayConfig, get_ollama_relay

UPSTREAM_URL = "http://ollama.test:11434"
NDJSON = "application/x-ndjson"

SAMPLE_MODELS: list[dict[str, Any]] = [
    {
        "name": "llama3:latest",
        "model": "llama3:latest",
        "modified_at": "2024-05-01T10:00:00Z",
        "size": 4661224676,
        "digest": "365c0bd3c000",
        "details": {
            "format": "gguf",
            "family": "llama",
            "families": ["llama"],
            "parameter_size": "8.0B",
            "quantization_level": "Q4_0",
        },
    },
    {
        "name": "mistral:7b",
        "model": "mistral:7b",
        "modified_at": "2024-04-20T08:30:00Z",
        "size": 4109865159,
        "digest": "61e88e884507",
        "details": {"format": "gguf", "family": "llama", "families": None},
    },
]

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


def ndjson(*objects: Any) -> bytes:
    """Encode objects as newline-terminated JSON lines."""
    return b"".join(json.dumps(obj, ensure_ascii=False).encode() + b"\n" for obj in objects)


def chat_line(content: str, done: bool = False) -> dict[str, Any]:
    return {
        "model": "llama3:latest",
        "created_at": "2024-05-01T10:00:00Z",
        "message": {"role": "assistant", "content": content},
        "done": done,
    }


class FakeOllama:
    """Simulated Ollama service for httpx.MockTransport.

    Serves ``models`` on /api/tags and streams ``chat_chunks`` on /api/chat.
    Assign ``handler`` to replace the behaviour for a test.
    """

    def __init__(self) -> None:
        self.models: list[dict[str, Any]] = list(SAMPLE_MODELS)
        self.chat_chunks: list[bytes] = [
            ndjson(chat_line("Hello")),
            ndjson(chat_line(", world")),
            ndjson(chat_line("!"), {"done": True, "done_reason": "stop"}),
        ]
        self.requests: list[httpx.Request] = []
        self.handler: Handler = self.serve

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return await self.handler(request)

    async def serve(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": self.models})
        if request.url.path == "/api/chat":
            return httpx.Response(200, headers={"content-type": NDJSON}, content=self._stream())
        return httpx.Response(404, text="404 page not found")

    async def _stream(self) -> AsyncIterator[bytes]:
        for chunk in self.chat_chunks:
            yield chunk

    @property
    def chat_payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path == "/api/chat"]


async def refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


@pytest.fixture
def app() -> Generator[FastAPI]:
    """Return the relay app, clearing dependency overrides afterwards."""
    yield relay_app
    relay_app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_ollama(app: FastAPI) -> FakeOllama:
    """Install a simulated Ollama service behind the relay."""
    fake = FakeOllama()
    config = RelayConfig(ollama_api_url=UPSTREAM_URL, request_timeout=None)
    app.dependency_overrides[get_ollama_relay] = lambda: OllamaRelay(
        config, transport=httpx.MockTransport(fake)
    )
    return fake


@pytest.fixture
def unconfigured_relay(app: FastAPI) -> FakeOllama:
    """Install a relay with no upstream URL; the fake records any attempt."""
    fake = FakeOllama()
    config = RelayConfig(ollama_api_url=None, request_timeout=None)
    app.dependency_overrides[get_ollama_relay] = lambda: OllamaRelay(
        config, transport=httpx.MockTransport(fake)
    )
    return fake


@pytest.fixture
def misconfigured_relay(app: FastAPI) -> FakeOllama:
    """Install a relay whose upstream URL cannot be parsed."""
    fake = FakeOllama()
    config = RelayConfig(ollama_api_url="http://[::1", request_timeout=None)
    app.dependency_overrides[get_ollama_relay] = lambda: OllamaRelay(
        config, transport=httpx.MockTransport(fake)
    )
    return fake
