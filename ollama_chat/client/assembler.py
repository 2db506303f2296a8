"""Client-side stream assembly for chat responses.

The chat view is an explicit state machine over immutable ChatState
snapshots. Every transition is a pure function returning a new snapshot:

    IDLE -> SENDING -> STREAMING -> IDLE    (success)
    IDLE -> SENDING -> ERROR -> IDLE        (failure at any point)

Messages carry a sequence id assigned at creation, used as their stable
identity when rendering.

NDJSONLineDecoder turns the raw byte chunks of a chat response into
complete lines. UTF-8 decoding state is carried across chunks, so a
multi-byte character split between two reads decodes correctly.
"""

import codecs
import logging
from dataclasses import dataclass, replace
from enum import Enum

from pydantic import ValidationError

from ollama_chat.models.schemas import ChatMessage, Role, StreamFragment

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Phase of the single in-flight chat exchange."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    ERROR = "error"


@dataclass(frozen=True)
class DisplayMessage:
    """A message shown in the chat history.

    Attributes:
        seq: Monotonic id assigned at creation, stable across re-renders.
        role: Speaker of the message.
        content: Message text as currently displayed.
    """

    seq: int
    role: Role
    content: str

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


@dataclass(frozen=True)
class ChatState:
    """Snapshot of one page view's chat session.

    Attributes:
        messages: Conversation history in chronological order.
        phase: Current phase of the exchange.
        models: Names of models available upstream.
        selected_model: Model used for the next exchange (None disables send).
        error: Last human-readable error, shown on the status line.
        assistant_content: Accumulated content of the streaming reply.
        next_seq: Sequence id for the next created message.
    """

    messages: tuple[DisplayMessage, ...] = ()
    phase: Phase = Phase.IDLE
    models: tuple[str, ...] = ()
    selected_model: str | None = None
    error: str | None = None
    assistant_content: str = ""
    next_seq: int = 0

    @property
    def is_busy(self) -> bool:
        return self.phase in (Phase.SENDING, Phase.STREAMING)

    @property
    def can_send(self) -> bool:
        return self.selected_model is not None and not self.is_busy

    def history(self) -> list[ChatMessage]:
        """Conversation history in the shape the relay expects."""
        return [m.to_chat_message() for m in self.messages]


def _append(state: ChatState, role: Role, content: str) -> ChatState:
    message = DisplayMessage(seq=state.next_seq, role=role, content=content)
    return replace(state, messages=state.messages + (message,), next_seq=state.next_seq + 1)


def with_models(state: ChatState, names: list[str]) -> ChatState:
    """Install the model listing.

    Keeps the current selection when it is still available, otherwise
    selects the first model. An empty listing leaves no model selected.
    """
    models = tuple(names)
    selected = state.selected_model if state.selected_model in models else None
    if selected is None and models:
        selected = models[0]
    return replace(state, models=models, selected_model=selected)


def select_model(state: ChatState, name: str | None) -> ChatState:
    if name is not None and name not in state.models:
        return state
    return replace(state, selected_model=name)


def submit(state: ChatState, text: str) -> ChatState:
    """IDLE -> SENDING: append the user's message.

    Returns:
        The new state, or ``state`` itself when nothing should be sent
        (blank input, no model selected, or an exchange in flight).
    """
    content = text.strip()
    if not content or not state.can_send:
        return state
    sending = _append(state, "user", content)
    return replace(sending, phase=Phase.SENDING, error=None, assistant_content="")


def begin_streaming(state: ChatState) -> ChatState:
    """SENDING -> STREAMING: append the empty assistant placeholder."""
    streaming = _append(state, "assistant", "")
    return replace(streaming, phase=Phase.STREAMING, assistant_content="")


def apply_fragment(state: ChatState, content: str) -> ChatState:
    """Add one fragment to the streaming reply.

    The last message's content is replaced with the whole accumulated
    reply, never appended to.
    """
    if state.phase is not Phase.STREAMING or not state.messages:
        return state
    accumulated = state.assistant_content + content
    last = replace(state.messages[-1], content=accumulated)
    return replace(state, messages=state.messages[:-1] + (last,), assistant_content=accumulated)


def finish(state: ChatState) -> ChatState:
    """STREAMING -> IDLE: the upstream stream closed."""
    return replace(state, phase=Phase.IDLE)


def fail(state: ChatState, message: str) -> ChatState:
    """Any phase -> ERROR.

    A placeholder assistant message that never received content is removed.
    """
    messages = state.messages
    if (
        state.phase is Phase.STREAMING
        and messages
        and messages[-1].role == "assistant"
        and not state.assistant_content
    ):
        messages = messages[:-1]
    return replace(state, messages=messages, phase=Phase.ERROR, error=message)


def recover(state: ChatState) -> ChatState:
    """ERROR -> IDLE, keeping the error visible until the next submit."""
    if state.phase is not Phase.ERROR:
        return state
    return replace(state, phase=Phase.IDLE, assistant_content="")


def clear_history(state: ChatState) -> ChatState:
    return replace(state, messages=(), error=None, assistant_content="")


def parse_fragment(line: str) -> str | None:
    """Extract the message content carried by one NDJSON line.

    Malformed lines are logged and skipped.

    Returns:
        The content string, or None when the line carries none.
    """
    try:
        fragment = StreamFragment.model_validate_json(line)
    except ValidationError as e:
        logger.warning(f"Skipping malformed stream line {line!r}: {e.errors()[0]['msg']}")
        return None
    return fragment.content


class NDJSONLineDecoder:
    """Split a chunked UTF-8 byte stream into complete, non-empty lines."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a chunk and return the lines it completes."""
        text = self._pending + self._decoder.decode(chunk)
        *lines, self._pending = text.split("\n")
        return [line for line in lines if line.strip()]

    def flush(self) -> list[str]:
        """Return the final unterminated line once the stream has closed."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return [tail] if tail.strip() else []
