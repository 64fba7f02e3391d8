"""
Structured logging for provider adapters and fallback chains.

Every line carries ``provider=...`` plus whatever fields the caller passes,
rendered as ``[provider=fallback model=a -> b request_id=1f2e3d4c] message``.
The library never installs handlers; applications configure ``logging`` as
usual and filter on the ``fallback_llm_sdk`` logger hierarchy.
"""

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional


@dataclass
class RequestContext:
    """Per-request bookkeeping yielded by :meth:`ProviderLogger.track_request`."""
    request_id: str
    method: str
    model: str
    start_time: float = field(default_factory=time.time)
    attempts: int = 0
    served_by: Optional[str] = None

    def elapsed_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)


class ProviderLogger:
    """Structured logger bound to one provider name."""

    def __init__(self, provider_name: str):
        """
        Args:
            provider_name: Name of the provider (e.g., "fallback", "openai")
        """
        self.provider = provider_name
        self.logger = logging.getLogger(f"fallback_llm_sdk.providers.{provider_name}")

    def _format_message(self, message: str, fields: Dict[str, Any]) -> str:
        parts = [f"provider={self.provider}"]
        parts.extend(f"{key}={value}" for key, value in fields.items() if value is not None)
        return f"[{' '.join(parts)}] {message}"

    def _log(self, level: int, message: str, error: Optional[BaseException] = None, **fields):
        if not self.logger.isEnabledFor(level):
            return
        if error is not None:
            fields['error_type'] = type(error).__name__
            fields['error_msg'] = str(error)
        self.logger.log(level, self._format_message(message, fields))

    def debug(self, message: str, **fields):
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, error: Optional[BaseException] = None, **fields):
        self._log(logging.WARNING, message, error=error, **fields)

    def error(self, message: str, error: Optional[BaseException] = None, **fields):
        self._log(logging.ERROR, message, error=error, **fields)

    @contextmanager
    def track_request(
        self,
        method: str,
        model: str,
        request_id: Optional[str] = None
    ) -> Iterator[RequestContext]:
        """
        Log the start, completion or failure of a request with its duration.

        The body may update ``attempts`` and ``served_by`` on the yielded
        context; both are included in the closing log line.

        Args:
            method: The method being called (e.g., "generate", "stream")
            model: The model being used
            request_id: Optional request ID (generated if not provided)
        """
        request = RequestContext(
            request_id=request_id or str(uuid.uuid4())[:8],
            method=method,
            model=model,
        )
        self.debug(f"Starting {method} request", model=model, request_id=request.request_id)

        try:
            yield request
        except Exception as e:
            self.error(
                f"Failed {method} request",
                model=model,
                request_id=request.request_id,
                attempts=request.attempts,
                duration_ms=request.elapsed_ms(),
                error=e
            )
            raise

        self.info(
            f"Completed {method} request",
            model=model,
            request_id=request.request_id,
            attempts=request.attempts,
            served_by=request.served_by,
            duration_ms=request.elapsed_ms()
        )
