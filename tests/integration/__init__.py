"""Integration tests for the relay app and the chat session working together.

Requests go through the real FastAPI app via ASGITransport; only the
upstream Ollama service is simulated.
"""
