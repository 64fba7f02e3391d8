"""Helpers shared by composite providers."""

from typing import Dict, Iterable, List, Pattern

from .base import ProviderAdapter


def merge_supported_urls(models: Iterable[ProviderAdapter]) -> Dict[str, List[Pattern[str]]]:
    """
    Merge ``supported_urls`` from all models (union).

    If any model supports a URL pattern, the composite supports it. Patterns
    are kept in chain order under each media type.
    """
    merged: Dict[str, List[Pattern[str]]] = {}

    for model in models:
        for media_type, patterns in model.supported_urls.items():
            merged.setdefault(media_type, []).extend(patterns)

    return merged
