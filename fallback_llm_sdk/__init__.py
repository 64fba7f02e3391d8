"""
Fallback LLM SDK - resilient calls across an ordered chain of LLM providers.

Wrap interchangeable models (e.g. the same capability from several vendors)
into one model that:
- Retries transient failures on the same model with exponential backoff
- Falls back to the next model on rate limits or exhausted retries
- Re-raises client errors immediately
- Reports total failure as a single AllModelsExhaustedError
"""

__version__ = "0.1.0"

from .config import FallbackSettings
from .models.conversation_types import ConversationMessage
from .models.conversation_types import TurnRole as ConversationRole
from .models.generation import GenerationParams, GenerationResponse
from .providers import (
    FallbackModel,
    ProviderAdapter,
    ProviderError,
    create_fallback_model,
    merge_supported_urls,
)
from .reliability import (
    AllModelsExhaustedError,
    CancellationToken,
    ErrorClassification,
    ErrorClassifier,
    ErrorEvent,
    FailedAttempt,
    FallbackConfigurationError,
    FallbackEvent,
    OperationCancelledError,
    RetryEvent,
    calculate_delay,
    default_should_retry,
)

__all__ = [
    # Composite model
    "FallbackModel",
    "create_fallback_model",
    "FallbackSettings",

    # Adapter contract
    "ProviderAdapter",
    "ProviderError",
    "merge_supported_urls",

    # Classification
    "ErrorClassification",
    "ErrorClassifier",
    "default_should_retry",
    "calculate_delay",

    # Cancellation
    "CancellationToken",
    "OperationCancelledError",

    # Errors and events
    "AllModelsExhaustedError",
    "FailedAttempt",
    "FallbackConfigurationError",
    "RetryEvent",
    "FallbackEvent",
    "ErrorEvent",

    # Models
    "GenerationParams",
    "GenerationResponse",
    "ConversationMessage",
    "ConversationRole",
]
