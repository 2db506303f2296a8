"""FastAPI endpoints for the Ollama chat relay.

Endpoints:
    - GET /health: Service health status
    - GET /api/ollama/tags: Model listing from Ollama
    - POST /api/ollama/chat: Streamed chat completion relay (NDJSON)
"""

from ollama_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
