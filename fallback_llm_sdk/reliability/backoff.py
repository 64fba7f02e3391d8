"""Exponential backoff with jitter for same-model retries."""

import math
import random
from typing import Any, Optional


def calculate_delay(
    attempt: int,
    base_delay_ms: float,
    max_delay_ms: float,
    rng: Optional[Any] = None
) -> int:
    """
    Calculate the delay before retry number ``attempt + 1``.

    delay = min(max_delay, base_delay * 2^attempt) * jitter, jitter in [0.5, 1.0)

    Args:
        attempt: 0-indexed attempt number on the current model
        base_delay_ms: Delay for the first retry before jitter
        max_delay_ms: Cap applied before jitter
        rng: Source with a ``random()`` method, defaults to the ``random`` module

    Returns:
        Delay in whole milliseconds
    """
    source = rng if rng is not None else random
    exponential = min(max_delay_ms, base_delay_ms * (2 ** attempt))
    jitter = 0.5 + source.random() * 0.5
    # Round half up
    return int(math.floor(exponential * jitter + 0.5))
