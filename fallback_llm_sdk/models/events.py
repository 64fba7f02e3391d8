"""Chunk types yielded by streaming adapters.

The fallback layer treats chunks as opaque; these types exist so adapters
and callers agree on a shape.
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, field
import time


@dataclass
class StreamEvent:
    """Base class for all stream chunks."""
    type: str = ""  # Will be set by subclasses
    provider: Optional[str] = None
    model: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class StreamDeltaEvent(StreamEvent):
    """A piece of generated text."""
    type: str = field(default="delta", init=False)
    delta: str = ""
    chunk_index: int = 0

    def __post_init__(self):
        self.type = "delta"

    def get_text(self) -> str:
        return self.delta


@dataclass
class StreamCompleteEvent(StreamEvent):
    """Final chunk of a stream."""
    type: str = field(default="complete", init=False)
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        self.type = "complete"
