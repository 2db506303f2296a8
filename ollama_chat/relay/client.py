"""Ollama relay service.

Wraps httpx access to the upstream Ollama service behind two operations:

1. ``list_models`` - GET ``/api/tags`` and return the JSON body verbatim.
2. ``open_chat_stream`` - POST ``/api/chat`` with ``stream`` forced on and
   hand back an UpstreamStream whose bytes are relayed untouched.

The upstream response status is known before any byte is relayed, so every
failure (missing config, refused connection, non-success status) is raised
as a RelayError before the caller commits to a 200 streaming response.

One httpx client is created per call; nothing is shared between requests.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ollama_chat.models.schemas import ChatRequest
from ollama_chat.relay.config import RelayConfig, get_relay_config
from ollama_chat.relay.errors import RelayError, classify_transport_error

logger = logging.getLogger(__name__)

NDJSON_MEDIA_TYPE = "application/x-ndjson"


class UpstreamStream:
    """An open, successful upstream chat response.

    Iterate ``aiter_bytes`` to relay the body; the upstream response and its
    client are closed when iteration ends or ``aclose`` is called.
    """

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def content_type(self) -> str:
        return self._response.headers.get("content-type") or NDJSON_MEDIA_TYPE

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the upstream body exactly as received, chunk by chunk."""
        try:
            if self._response.is_stream_consumed:
                # Transport handed back an already-read body.
                yield self._response.content
            else:
                async for chunk in self._response.aiter_raw():
                    yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._client.aclose()


class OllamaRelay:
    """Stateless gateway to the upstream Ollama service."""

    def __init__(
        self,
        config: RelayConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Relay configuration. Loads from environment if not provided.
            transport: Optional httpx transport, used to substitute the upstream.
        """
        self._config = config or get_relay_config()
        self._transport = transport

    @property
    def config(self) -> RelayConfig:
        return self._config

    def require_base_url(self) -> str:
        """Return the upstream URL, or raise ConfigMissing without any I/O."""
        url = self._config.ollama_api_url
        if url is None:
            logger.error("OLLAMA_API_URL is not defined in environment variables.")
            raise RelayError.config_missing()
        try:
            httpx.URL(url)
        except httpx.InvalidURL as e:
            logger.error(f"OLLAMA_API_URL is not a valid URL: {url!r} ({e})")
            raise RelayError.config_invalid(url) from e
        return url

    def _create_client(self, base_url: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        )

    def _classify(self, exc: httpx.HTTPError, base_url: str) -> RelayError | None:
        error = classify_transport_error(exc, base_url)
        if error is not None:
            logger.error(f"Failed to reach Ollama service at {base_url}: {exc!r}")
        return error

    async def list_models(self) -> dict[str, Any]:
        """Fetch the model listing from Ollama.

        Returns:
            The upstream JSON body, unmodified.

        Raises:
            RelayError: Missing config, unreachable upstream or non-success status.
        """
        base_url = self.require_base_url()
        logger.info(f"Fetching tags from Ollama service: {base_url}/api/tags")

        async with self._create_client(base_url) as client:
            try:
                response = await client.get("/api/tags")
            except httpx.HTTPError as e:
                error = self._classify(e, base_url)
                if error is None:
                    raise
                raise error from e

            if response.is_error:
                logger.error(
                    f"Error from Ollama service ({response.status_code}): {response.text}"
                )
                raise RelayError.upstream_http_error(response.status_code, response.text)

            return response.json()

    async def open_chat_stream(self, request: ChatRequest) -> UpstreamStream:
        """Start a streamed chat completion on Ollama.

        Args:
            request: Validated chat request; ``stream`` is forced to true.

        Returns:
            UpstreamStream over the successful upstream response.

        Raises:
            RelayError: Missing config, unreachable upstream or non-success status.
        """
        base_url = self.require_base_url()
        logger.info(
            f"Forwarding chat request to Ollama: {base_url}/api/chat for model {request.model}"
        )

        client = self._create_client(base_url)
        try:
            upstream_request = client.build_request(
                "POST", "/api/chat", json=request.upstream_payload()
            )
            response = await client.send(upstream_request, stream=True)
        except httpx.HTTPError as e:
            await client.aclose()
            error = self._classify(e, base_url)
            if error is None:
                raise
            raise error from e

        if response.is_error:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
                await client.aclose()
            logger.error(f"Error from Ollama chat service ({response.status_code}): {body}")
            raise RelayError.upstream_http_error(response.status_code, body)

        return UpstreamStream(response, client)


def get_ollama_relay() -> OllamaRelay:
    """Build a relay for the current request.

    Used as a FastAPI dependency; configuration is re-read on every call.

    Returns:
        A fresh OllamaRelay.
    """
    return OllamaRelay(get_relay_config())
