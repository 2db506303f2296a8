"""Ollama Chat - minimal web chat client for a locally hosted Ollama server.

Combines FastAPI for the relay endpoints, httpx for upstream and client
HTTP, NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - relay: Upstream configuration, error classification and forwarding
    - api: HTTP endpoints relaying model listings and chat streams
    - client: Stream assembly and chat session state
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
