"""Data models for the Ollama chat relay.

Pydantic schemas shared by the relay handlers and the browser-side
stream assembler.
"""

from ollama_chat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ErrorEnvelope,
    FragmentMessage,
    ModelDescriptor,
    ModelDetails,
    ModelList,
    Role,
    StreamFragment,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ErrorEnvelope",
    "FragmentMessage",
    "ModelDescriptor",
    "ModelDetails",
    "ModelList",
    "Role",
    "StreamFragment",
]
