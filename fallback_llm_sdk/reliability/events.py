"""Lifecycle events emitted while walking a fallback chain."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import time

from .error_classifier import ErrorClassification

if TYPE_CHECKING:
    from ..providers.base import ProviderAdapter


@dataclass
class RetryEvent:
    """Emitted right before sleeping and retrying the same model."""
    model_index: int
    model: ProviderAdapter
    attempt: int  # 1-indexed retry number
    max_retries: int
    error: BaseException
    delay_ms: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class FallbackEvent:
    """Emitted right before moving on to the next model.

    Never emitted after the last model fails.
    """
    failed_model_index: int
    failed_model: ProviderAdapter
    next_model_index: int
    next_model: ProviderAdapter
    error: BaseException
    total_attempts: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ErrorEvent:
    """Emitted for every caught failure, before acting on its classification."""
    model_index: int
    model: ProviderAdapter
    error: BaseException
    classification: ErrorClassification
    timestamp: float = field(default_factory=time.time)
