"""Reliability layer for the fallback chain.

This layer handles:
- Error classification (retry / fallback / throw)
- Exponential backoff with jitter
- Cooperative cancellation and cancellable sleep
- The aggregate error raised when every model fails
- Lifecycle events and observer dispatch
"""

from .error_classifier import ErrorClassifier, ErrorClassification, ShouldRetry, default_should_retry
from .backoff import calculate_delay
from .cancellation import CancellationToken, sleep
from .errors import (
    AllModelsExhaustedError,
    FailedAttempt,
    FallbackConfigurationError,
    OperationCancelledError,
)
from .events import RetryEvent, FallbackEvent, ErrorEvent
from .observers import FallbackEventManager

__all__ = [
    "ErrorClassifier",
    "ErrorClassification",
    "ShouldRetry",
    "default_should_retry",
    "calculate_delay",
    "CancellationToken",
    "sleep",
    "AllModelsExhaustedError",
    "FailedAttempt",
    "FallbackConfigurationError",
    "OperationCancelledError",
    "RetryEvent",
    "FallbackEvent",
    "ErrorEvent",
    "FallbackEventManager",
]
