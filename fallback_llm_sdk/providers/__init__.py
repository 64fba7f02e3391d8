"""
Provider Adapters Layer

The adapter contract shared by every model, and the composite fallback
adapter built on top of it.
"""

from .base import ProviderAdapter, ProviderError
from .fallback import FallbackModel, create_fallback_model
from .utils import merge_supported_urls

__all__ = [
    "ProviderAdapter",
    "ProviderError",
    "FallbackModel",
    "create_fallback_model",
    "merge_supported_urls",
]
