"""Configuration module for the fallback SDK."""

from .settings import (
    ENV_PREFIX,
    DEFAULT_MAX_RETRIES_PER_MODEL,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_PROVIDER_NAME,
    FallbackSettings,
)

__all__ = [
    "ENV_PREFIX",
    "DEFAULT_MAX_RETRIES_PER_MODEL",
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_MAX_DELAY_MS",
    "DEFAULT_PROVIDER_NAME",
    "FallbackSettings",
]
