"""Data models for the fallback SDK."""

from .generation import GenerationParams, GenerationResponse
from .conversation_types import ConversationMessage, TurnRole as ConversationRole
from .events import StreamEvent, StreamDeltaEvent, StreamCompleteEvent

__all__ = [
    # Generation models
    "GenerationParams",
    "GenerationResponse",

    # Conversation models
    "ConversationMessage",
    "ConversationRole",

    # Stream chunks
    "StreamEvent",
    "StreamDeltaEvent",
    "StreamCompleteEvent",
]
