"""Unit tests for cancellation tokens and cancellable sleep."""

import asyncio
import threading

import pytest

from fallback_llm_sdk.reliability.cancellation import CancellationToken, sleep
from fallback_llm_sdk.reliability.errors import OperationCancelledError


def _capture_timers(monkeypatch, loop):
    handles = []
    real_call_later = loop.call_later

    def capture(*args, **kwargs):
        handle = real_call_later(*args, **kwargs)
        handles.append(handle)
        return handle

    monkeypatch.setattr(loop, "call_later", capture)
    return handles


class TestCancellationToken:
    """Test the cancellation signal itself."""

    def test_initial_state(self, cancel_token):
        assert cancel_token.is_cancelled() is False
        assert cancel_token.reason is None
        cancel_token.raise_if_cancelled()

    def test_cancel_raises_default_error(self, cancel_token):
        cancel_token.cancel()

        assert cancel_token.is_cancelled() is True
        with pytest.raises(OperationCancelledError):
            cancel_token.raise_if_cancelled()

    def test_cancel_with_reason(self, cancel_token):
        reason = TimeoutError("request deadline exceeded")
        cancel_token.cancel(reason)

        with pytest.raises(TimeoutError) as exc_info:
            cancel_token.raise_if_cancelled()
        assert exc_info.value is reason

    def test_only_first_cancel_counts(self, cancel_token):
        first = RuntimeError("first")
        cancel_token.cancel(first)
        cancel_token.cancel(RuntimeError("second"))
        assert cancel_token.reason is first

    def test_callbacks_run_once(self, cancel_token):
        calls = []
        cancel_token.add_callback(lambda: calls.append("a"))
        cancel_token.add_callback(lambda: calls.append("b"))

        cancel_token.cancel()
        cancel_token.cancel()

        assert calls == ["a", "b"]

    def test_callback_on_cancelled_token_runs_immediately(self, cancel_token):
        cancel_token.cancel()
        calls = []
        cancel_token.add_callback(lambda: calls.append(1))
        assert calls == [1]

    def test_removed_callback_is_not_called(self, cancel_token):
        calls = []
        remove = cancel_token.add_callback(lambda: calls.append(1))
        remove()
        remove()  # Removing twice is harmless

        cancel_token.cancel()
        assert calls == []


class TestSleep:
    """Test the cancellable sleep primitive."""

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_sleep_without_token(self):
        loop = asyncio.get_running_loop()
        start = loop.time()
        await sleep(20)
        assert loop.time() - start >= 0.015

    @pytest.mark.slow
    @pytest.mark.asyncio
    async def test_sleep_completes_when_not_cancelled(self, cancel_token, monkeypatch):
        loop = asyncio.get_running_loop()
        handles = _capture_timers(monkeypatch, loop)
        start = loop.time()

        await sleep(20, cancel_token)

        assert loop.time() - start >= 0.015
        assert len(handles) == 1
        assert cancel_token._callbacks == []

    @pytest.mark.asyncio
    async def test_already_cancelled_fails_immediately(self, cancel_token, monkeypatch):
        loop = asyncio.get_running_loop()
        handles = _capture_timers(monkeypatch, loop)
        cancel_token.cancel()

        with pytest.raises(OperationCancelledError):
            await sleep(60_000, cancel_token)

        assert handles == []

    @pytest.mark.asyncio
    async def test_cancel_during_wait(self, cancel_token, monkeypatch):
        loop = asyncio.get_running_loop()
        handles = _capture_timers(monkeypatch, loop)
        start = loop.time()
        loop.call_soon(cancel_token.cancel)

        with pytest.raises(OperationCancelledError):
            await sleep(60_000, cancel_token)

        assert loop.time() - start < 5
        assert handles[0].cancelled()
        assert cancel_token._callbacks == []

    @pytest.mark.asyncio
    async def test_cancel_reason_propagates(self, cancel_token):
        reason = TimeoutError("deadline")
        asyncio.get_running_loop().call_soon(cancel_token.cancel, reason)

        with pytest.raises(TimeoutError) as exc_info:
            await sleep(60_000, cancel_token)
        assert exc_info.value is reason

    @pytest.mark.asyncio
    async def test_cancel_from_another_thread(self, cancel_token):
        timer = threading.Timer(0.02, cancel_token.cancel)
        timer.start()
        try:
            with pytest.raises(OperationCancelledError):
                await asyncio.wait_for(sleep(60_000, cancel_token), timeout=5)
        finally:
            timer.cancel()

    @pytest.mark.asyncio
    async def test_task_cancellation_releases_timer(self, cancel_token, monkeypatch):
        loop = asyncio.get_running_loop()
        handles = _capture_timers(monkeypatch, loop)

        task = asyncio.ensure_future(sleep(60_000, cancel_token))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert handles[0].cancelled()
        assert cancel_token._callbacks == []
