"""Cooperative cancellation for in-flight fallback requests.

A :class:`CancellationToken` is passed along with a request. The fallback
loop checks it before every attempt and the backoff :func:`sleep` wakes up
as soon as it fires. Tokens may be cancelled from any thread.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, List, Optional

from .errors import OperationCancelledError


class CancellationToken:
    """Thread-safe cancellation signal.

    Examples:
        >>> token = CancellationToken()
        >>> token.is_cancelled()
        False
        >>> token.cancel()
        >>> token.is_cancelled()
        True
    """

    def __init__(self) -> None:
        self._is_cancelled = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[BaseException] = None
        self._callbacks: List[Callable[[], None]] = []

    @property
    def reason(self) -> Optional[BaseException]:
        """Exception supplied to :meth:`cancel`, if any."""
        return self._reason

    def cancel(self, reason: Optional[BaseException] = None) -> None:
        """Signal cancellation. Only the first call has any effect.

        Args:
            reason: Exception to raise in place of OperationCancelledError.
        """
        with self._lock:
            if self._is_cancelled.is_set():
                return
            self._reason = reason
            self._is_cancelled.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def is_cancelled(self) -> bool:
        return self._is_cancelled.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise the cancellation failure if the token has fired."""
        if not self.is_cancelled():
            return
        if self._reason is not None:
            raise self._reason
        raise OperationCancelledError()

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback`` to run once on cancellation.

        Runs immediately if the token has already fired.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._is_cancelled.is_set():
                self._callbacks.append(callback)
                registered = True
            else:
                registered = False

        if not registered:
            callback()

        def remove() -> None:
            with self._lock:
                try:
                    self._callbacks.remove(callback)
                except ValueError:
                    # Already fired or removed
                    pass

        return remove


async def sleep(delay_ms: float, cancel_token: Optional[CancellationToken] = None) -> None:
    """Sleep for ``delay_ms`` milliseconds unless ``cancel_token`` fires first.

    Raises the token's cancellation failure immediately if it is already
    cancelled, or as soon as it is cancelled during the wait. The timer and
    the token callback are released on every exit path.
    """
    if cancel_token is None:
        await asyncio.sleep(delay_ms / 1000)
        return

    cancel_token.raise_if_cancelled()

    loop = asyncio.get_running_loop()
    waiter: asyncio.Future = loop.create_future()

    def _settle(cancelled: bool) -> None:
        if not waiter.done():
            waiter.set_result(cancelled)

    def _on_cancel() -> None:
        # May be called from another thread
        loop.call_soon_threadsafe(_settle, True)

    timer = loop.call_later(delay_ms / 1000, _settle, False)
    remove_callback = cancel_token.add_callback(_on_cancel)
    try:
        cancelled = await waiter
    finally:
        timer.cancel()
        remove_callback()

    if cancelled:
        cancel_token.raise_if_cancelled()
