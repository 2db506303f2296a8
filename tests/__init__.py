"""Test package for the Ollama chat relay.

Structure:
    - unit/: Configuration, error classification, schemas and stream assembly
    - integration/: Relay endpoints and the chat session end to end

The upstream Ollama service is replaced by httpx.MockTransport; everything
between the browser-side session and the upstream runs for real.
"""
