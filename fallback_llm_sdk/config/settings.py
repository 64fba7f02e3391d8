"""
Fallback chain settings.

Settings can be built from keyword arguments or loaded from the environment
(``FALLBACK_*`` variables, with ``.env`` support through python-dotenv).
"""

import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "FALLBACK_"

DEFAULT_MAX_RETRIES_PER_MODEL = 0
DEFAULT_BASE_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 30000
DEFAULT_PROVIDER_NAME = "fallback"


class FallbackSettings(BaseModel):
    """Retry budget, backoff and identity of a fallback chain."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries_per_model: int = Field(
        default=DEFAULT_MAX_RETRIES_PER_MODEL,
        ge=0,
        description="Retries on the same model before moving to the next (0 = fallback immediately)"
    )
    base_delay_ms: int = Field(
        default=DEFAULT_BASE_DELAY_MS,
        ge=0,
        description="Base delay for exponential backoff between retries"
    )
    max_delay_ms: int = Field(
        default=DEFAULT_MAX_DELAY_MS,
        ge=0,
        description="Upper bound for the backoff delay before jitter"
    )
    provider: str = Field(default=DEFAULT_PROVIDER_NAME, min_length=1)
    model_id: Optional[str] = Field(
        default=None,
        description="Composite model id; defaults to the chain's model ids joined with ' -> '"
    )

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> "FallbackSettings":
        """
        Load settings from environment variables.

        Reads ``<prefix>MAX_RETRIES_PER_MODEL``, ``<prefix>BASE_DELAY_MS``,
        ``<prefix>MAX_DELAY_MS``, ``<prefix>PROVIDER`` and ``<prefix>MODEL_ID``.
        Keyword overrides take precedence over the environment.
        """
        load_dotenv()

        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{prefix}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
