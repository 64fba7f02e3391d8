from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from .events import ErrorEvent, FallbackEvent, RetryEvent

# Observers may be plain callables or coroutine functions
Observer = Callable[[Any], Union[None, Awaitable[None]]]


class FallbackEventManager:
    def __init__(
        self,
        on_retry: Optional[Observer] = None,
        on_fallback: Optional[Observer] = None,
        on_error: Optional[Observer] = None,
    ) -> None:
        self.on_retry = on_retry
        self.on_fallback = on_fallback
        self.on_error = on_error

    async def emit_retry(self, event: RetryEvent) -> None:
        await _notify(self.on_retry, event)

    async def emit_fallback(self, event: FallbackEvent) -> None:
        await _notify(self.on_fallback, event)

    async def emit_error(self, event: ErrorEvent) -> None:
        await _notify(self.on_error, event)


async def _notify(observer: Optional[Observer], event: Any) -> None:
    if observer is None:
        return
    result = observer(event)
    if inspect.isawaitable(result):
        await result
