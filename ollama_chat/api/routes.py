"""Ollama relay endpoints.

Two stateless handlers forwarding to the upstream Ollama service:

    - GET /api/ollama/tags: Model listing, returned verbatim
    - POST /api/ollama/chat: Streamed chat completion, relayed byte for byte

Every failure is answered with ``{"error": "..."}``; only a successful chat
returns raw NDJSON bytes.
"""

import json
import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask

from ollama_chat.models.schemas import ChatRequest, ErrorEnvelope
from ollama_chat.relay.client import OllamaRelay, get_ollama_relay
from ollama_chat.relay.errors import RelayError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ollama", tags=["ollama"])

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorEnvelope} for code in (400, 500, 503, 504)
}


def error_response(message: str, status_code: int) -> JSONResponse:
    """Build the uniform error envelope response."""
    return JSONResponse({"error": message}, status_code=status_code)


async def _parse_chat_request(request: Request) -> ChatRequest | JSONResponse:
    """Read and validate the chat body.

    Returns:
        The validated ChatRequest, or a 400 error response.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response("Invalid JSON in request body.", status.HTTP_400_BAD_REQUEST)

    if not isinstance(body, dict) or not body.get("model") or body.get("messages") is None:
        return error_response(
            "Missing model or messages in request body.", status.HTTP_400_BAD_REQUEST
        )

    try:
        return ChatRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        return error_response(
            f"Invalid chat request: {location}: {first['msg']}",
            status.HTTP_400_BAD_REQUEST,
        )


@router.get("/tags", responses=ERROR_RESPONSES)
async def list_tags(relay: OllamaRelay = Depends(get_ollama_relay)) -> Response:
    """List the models available on the Ollama service.

    Returns:
        The upstream ``{"models": [...]}`` body unmodified.

    Raises:
        500: Upstream URL not configured, or unexpected failure.
        503: Ollama service unreachable.
        Other: Upstream non-success status, propagated.
    """
    try:
        data = await relay.list_models()
    except RelayError as e:
        return error_response(e.message, e.status_code)
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch from Ollama service")
        return error_response(
            "An unexpected error occurred while trying to connect to the Ollama service.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(data)


@router.post("/chat", responses=ERROR_RESPONSES)
async def chat(
    request: Request,
    relay: OllamaRelay = Depends(get_ollama_relay),
) -> Response:
    """Relay a chat completion from Ollama as an NDJSON stream.

    The body is read manually so malformed input is answered with a 400
    envelope rather than FastAPI's 422 validation format.

    Returns:
        200 with the upstream body streamed unmodified.

    Raises:
        400: Invalid JSON, missing model/messages, or invalid messages.
        500: Upstream URL not configured, or unexpected failure.
        503: Ollama service unreachable.
        Other: Upstream non-success status, propagated.
    """
    try:
        relay.require_base_url()
    except RelayError as e:
        return error_response(e.message, e.status_code)

    parsed = await _parse_chat_request(request)
    if isinstance(parsed, JSONResponse):
        return parsed

    try:
        upstream = await relay.open_chat_stream(parsed)
    except RelayError as e:
        return error_response(e.message, e.status_code)
    except httpx.HTTPError:
        logger.exception("Error in chat API endpoint")
        return error_response(
            "An unexpected error occurred in the chat API.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return StreamingResponse(
        upstream.aiter_bytes(),
        status_code=status.HTTP_200_OK,
        media_type=upstream.content_type,
        background=BackgroundTask(upstream.aclose),
    )
