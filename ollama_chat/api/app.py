"""FastAPI application for the Ollama chat relay.

The relay holds no resources between requests: each handler builds its own
upstream client, so the app has no startup or shutdown work.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ollama_chat.api.routes import router as ollama_router
from ollama_chat.relay.config import get_relay_config


def cors_origins() -> list[str]:
    """Origins allowed to call the relay from a browser.

    Read from comma-separated ``CORS_ALLOW_ORIGINS``; all origins by default.
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()] or ["*"]


def create_app() -> FastAPI:
    """Create the relay app with CORS, the Ollama router and ``/health``."""
    application = FastAPI(
        title="Ollama Chat Relay",
        description=(
            "Lists the models of a local Ollama server and relays streamed "
            "chat completions to the browser as NDJSON."
        ),
        version="0.1.0",
    )

    origins = cors_origins()
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin.
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(ollama_router)

    @application.get("/health")
    async def health_check() -> dict[str, str | bool]:
        """Report liveness and whether an upstream URL is configured.

        Never contacts the upstream.
        """
        return {
            "status": "healthy",
            "service": "ollama-chat-relay",
            "upstream_configured": get_relay_config().is_configured,
        }

    return application


app = create_app()
