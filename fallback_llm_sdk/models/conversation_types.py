from pydantic import BaseModel, Field
from typing import Dict, Any, Optional
from enum import Enum


class TurnRole(str, Enum):
    """Conversation turn roles."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationMessage(BaseModel):
    """Message format passed through to provider adapters."""

    role: TurnRole
    content: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    name: Optional[str] = None
