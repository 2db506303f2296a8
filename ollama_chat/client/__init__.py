"""Browser-side chat client.

Assembles streamed NDJSON chat responses into a growing assistant message
and tracks the single in-flight exchange as immutable state snapshots.
"""

from ollama_chat.client.assembler import ChatState, DisplayMessage, NDJSONLineDecoder, Phase
from ollama_chat.client.session import ChatSession

__all__ = ["ChatSession", "ChatState", "DisplayMessage", "NDJSONLineDecoder", "Phase"]
