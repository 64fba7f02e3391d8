from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List


class GenerationParams(BaseModel):
    """
    Generation parameters shared by every model in a fallback chain.

    The fallback layer never inspects these values; they are handed to each
    adapter unchanged so that the same request can be replayed against the
    next model in the chain.
    """
    model_config = ConfigDict(extra="allow")  # Allow provider-specific fields to pass through

    max_tokens: int = Field(default=512, ge=1, description="Maximum tokens to generate")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: float = Field(default=1.0, ge=0.0, le=1.0, description="Nucleus sampling parameter")
    stop: Optional[List[str]] = Field(None, description="Stop sequences")
    response_format: Optional[Dict[str, Any]] = Field(None, description="Response format (e.g., JSON schema)")
    seed: Optional[int] = Field(None, description="Random seed for deterministic generation")
    metadata: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional metadata (trace_id, idempotency_key, etc.)"
    )


class GenerationResponse(BaseModel):
    """Response model for one-shot generation."""
    text: str
    model: str
    provider: str
    usage: Dict[str, Any] = Field(default_factory=dict)
    finish_reason: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
