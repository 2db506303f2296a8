"""Chat session driving the stream assembler over HTTP.

ChatSession owns the ChatState for one page view and performs the network
side of each transition against the relay endpoints. Every new snapshot is
published through ``on_change`` so the view can re-render.
"""

import logging
import os
from collections.abc import Callable

import httpx

from ollama_chat.client.assembler import (
    ChatState,
    NDJSONLineDecoder,
    Phase,
    apply_fragment,
    begin_streaming,
    clear_history,
    fail,
    finish,
    parse_fragment,
    recover,
    select_model,
    submit,
    with_models,
)
from ollama_chat.models.schemas import ModelList

logger = logging.getLogger(__name__)

_WILDCARD_HOSTS = ("", "0.0.0.0", "::")


def relay_base_url() -> str:
    """Resolve where the page reaches the relay API.

    ``API_BASE_URL`` wins when set. Otherwise the relay is the server this
    process runs, at ``HOST``/``PORT``; wildcard bind addresses are reached
    through loopback.

    Returns:
        Base URL without a trailing slash.
    """
    explicit = os.getenv("API_BASE_URL", "").strip()
    if explicit:
        return explicit.rstrip("/")

    host = os.getenv("HOST", "").strip()
    if host in _WILDCARD_HOSTS:
        host = "127.0.0.1"
    elif ":" in host:
        host = f"[{host}]"
    port = os.getenv("PORT", "8000").strip() or "8000"
    return f"http://{host}:{port}"


class RelayResponseError(Exception):
    """The relay answered with a non-success status."""


def _error_text(response: httpx.Response) -> str:
    try:
        message = response.json().get("error")
    except (ValueError, AttributeError):
        message = None
    return message or f"HTTP {response.status_code}"


class ChatSession:
    """Transient chat state for a single page view."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_change: Callable[[ChatState], None] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            base_url: Where the relay API is served (defaults to relay_base_url()).
            transport: Optional httpx transport (e.g. ASGITransport in tests).
            on_change: Called with every new state snapshot.
        """
        self.state = ChatState()
        self._base_url = base_url or relay_base_url()
        self._transport = transport
        self._on_change = on_change

    def _set(self, state: ChatState) -> None:
        if state is self.state:
            return
        self.state = state
        if self._on_change is not None:
            self._on_change(state)

    def _client(self) -> httpx.AsyncClient:
        # No timeout: a hung upstream keeps the session streaming.
        return httpx.AsyncClient(
            base_url=self._base_url, transport=self._transport, timeout=None
        )

    def _fail(self, message: str) -> None:
        self._set(fail(self.state, message))
        self._set(recover(self.state))

    async def load_models(self) -> None:
        """Populate the model dropdown from ``GET /api/ollama/tags``."""
        try:
            async with self._client() as client:
                response = await client.get("/api/ollama/tags")
            if response.is_error:
                raise RelayResponseError(_error_text(response))
            listing = ModelList.model_validate(response.json())
        except (httpx.HTTPError, RelayResponseError, ValueError) as e:
            logger.error(f"Failed to load models: {e}")
            self._set(with_models(self.state, []))
            self._fail(f"Failed to load models: {e}")
            return

        self._set(with_models(self.state, listing.names))
        if not listing.models:
            logger.warning("Ollama reported no models")

    def select_model(self, name: str | None) -> None:
        self._set(select_model(self.state, name))

    def new_chat(self) -> None:
        if self.state.is_busy:
            return
        self._set(clear_history(self.state))

    async def send(self, text: str) -> None:
        """Send a user message and assemble the streamed reply.

        Blank input, a missing model, or an exchange already in flight is
        ignored without touching history or the network.
        """
        sending = submit(self.state, text)
        if sending is self.state:
            return
        self._set(sending)

        payload = {
            "model": self.state.selected_model,
            "messages": [m.model_dump() for m in self.state.history()],
        }
        decoder = NDJSONLineDecoder()

        try:
            async with self._client() as client:
                async with client.stream("POST", "/api/ollama/chat", json=payload) as response:
                    if response.is_error:
                        await response.aread()
                        raise RelayResponseError(_error_text(response))

                    self._set(begin_streaming(self.state))
                    async for chunk in response.aiter_bytes():
                        for line in decoder.feed(chunk):
                            self._apply_line(line)
                    for line in decoder.flush():
                        self._apply_line(line)
        except RelayResponseError as e:
            logger.error(f"Chat request failed: {e}")
            self._fail(str(e))
            return
        except httpx.HTTPError as e:
            logger.error(f"Chat request failed: {e!r}")
            self._fail(f"Connection failed: {e}")
            return

        if self.state.phase is Phase.STREAMING:
            self._set(finish(self.state))

    def _apply_line(self, line: str) -> None:
        content = parse_fragment(line)
        if content:
            self._set(apply_fragment(self.state, content))
