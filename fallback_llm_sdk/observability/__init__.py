"""Observability helpers: structured logging."""

from .logging import ProviderLogger, RequestContext

__all__ = [
    "ProviderLogger",
    "RequestContext",
]
