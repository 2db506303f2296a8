"""Pydantic models for the relay API and the Ollama wire format.

Models:
    - ChatMessage: One turn of the conversation history
    - ChatRequest: Incoming chat relay payload
    - ModelDetails / ModelDescriptor / ModelList: Ollama model listing
    - FragmentMessage / StreamFragment: One decoded NDJSON line of a chat stream
    - ErrorEnvelope: Uniform error body returned by the relay
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        role: The speaker identifier (user, assistant, or system).
        content: The message text.
    """

    role: Role = Field(..., description="Message role: 'user', 'assistant', or 'system'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    ``stream`` is accepted for compatibility but never forwarded as given;
    the relay always asks the upstream for a streamed response.

    Attributes:
        model: Name of the Ollama model to chat with.
        messages: Conversation history in chronological order.
        stream: Ignored caller preference.
        options: Optional Ollama generation options.
        format: Optional structured output format.
        keep_alive: Optional model keep-alive duration.
    """

    model: str = Field(..., min_length=1)
    messages: list[ChatMessage]
    stream: bool | None = None
    options: dict[str, Any] | None = None
    format: str | dict[str, Any] | None = None
    keep_alive: str | int | float | None = None

    def upstream_payload(self) -> dict[str, Any]:
        """Build the body sent to Ollama's ``/api/chat``."""
        payload = self.model_dump(exclude_none=True, exclude={"stream"})
        payload["stream"] = True
        return payload


class ModelDetails(BaseModel):
    """Model family and quantization details reported by Ollama."""

    model_config = ConfigDict(extra="allow")

    format: str | None = None
    family: str | None = None
    families: list[str] | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None


class ModelDescriptor(BaseModel):
    """One entry of Ollama's model listing.

    Only ``name`` is relied on; the remaining metadata is informational.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    model: str | None = None
    modified_at: str | None = None
    size: int | None = None
    digest: str | None = None
    details: ModelDetails | None = None


class ModelList(BaseModel):
    """Body of ``GET /api/ollama/tags``."""

    model_config = ConfigDict(extra="allow")

    models: list[ModelDescriptor] = Field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [m.name for m in self.models]


class FragmentMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str | None = None
    content: str | None = None


class StreamFragment(BaseModel):
    """A decoded NDJSON line from a streamed chat response.

    Attributes:
        message: Incremental message piece, absent on some lines.
        done: Upstream end-of-message marker (informational only).
    """

    model_config = ConfigDict(extra="allow")

    message: FragmentMessage | None = None
    done: bool | None = None

    @property
    def content(self) -> str | None:
        return self.message.content if self.message else None


class ErrorEnvelope(BaseModel):
    """Uniform error body: ``{"error": "..."}``."""

    error: str
