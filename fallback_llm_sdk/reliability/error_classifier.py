"""
Error classification for the fallback chain.

Every failure caught while calling a model is mapped to one of three actions:

- RETRY: call the same model again after a backoff delay (if budget remains)
- FALLBACK: give up on this model and move to the next one immediately
- THROW: fatal, abort the whole request and re-raise the failure as-is

The default policy is :func:`default_should_retry`. Callers can pass any
callable with the same signature to replace it.
"""

import socket
import ssl
from enum import Enum
from typing import Callable, Optional, Tuple, Type

import httpx


class ErrorClassification(str, Enum):
    """How a caught failure should be handled."""
    RETRY = "retry"        # Retry same model (if retries remain), then fallback
    FALLBACK = "fallback"  # Skip retries, immediately try next model
    THROW = "throw"        # Fatal, do not retry or fallback


ShouldRetry = Callable[[BaseException], ErrorClassification]


class ErrorClassifier:
    """Default classification policy based on status codes and error types."""

    # Rate limited: the next model most likely has its own quota
    FALLBACK_STATUS_CODES = {429}
    SERVER_ERROR_MIN_STATUS = 500

    NETWORK_ERROR_TYPES: Tuple[Type[BaseException], ...] = (
        httpx.TransportError,
        ConnectionError,
        socket.gaierror,
        ssl.SSLError,
    )

    # Matched against lower-cased messages of other OSErrors
    NETWORK_ERROR_PATTERNS = (
        'connection refused', 'connection reset', 'connection aborted',
        'connection error', 'network error', 'network is unreachable',
        'dns resolution', 'name resolution', 'name or service not known',
        'nodename nor servname', 'ssl', 'tls', 'handshake',
    )

    @classmethod
    def classify(cls, error: BaseException) -> ErrorClassification:
        """
        Classify an error.

        Order of checks:
        1. status 429 -> FALLBACK
        2. status >= 500 -> RETRY
        3. explicit ``is_retryable`` flag -> RETRY
        4. any other status code -> THROW
        5. network transport failure -> RETRY
        6. anything else -> THROW

        Args:
            error: The exception to classify

        Returns:
            ErrorClassification
        """
        status_code = cls.get_status_code(error)

        if status_code in cls.FALLBACK_STATUS_CODES:
            return ErrorClassification.FALLBACK

        if status_code is not None and status_code >= cls.SERVER_ERROR_MIN_STATUS:
            return ErrorClassification.RETRY

        if getattr(error, 'is_retryable', False) is True:
            return ErrorClassification.RETRY

        if status_code is not None:
            # Client errors (400, 401, 403, etc.)
            return ErrorClassification.THROW

        if cls.is_network_error(error):
            return ErrorClassification.RETRY

        # Unknown errors: never swallow what we don't understand
        return ErrorClassification.THROW

    @staticmethod
    def get_status_code(error: BaseException) -> Optional[int]:
        """Extract an HTTP-style status code from an error, if it has one."""
        status_code = getattr(error, 'status_code', None)
        if _is_status(status_code):
            return status_code

        # httpx.HTTPStatusError and SDK errors that keep the response around
        response = getattr(error, 'response', None)
        status_code = getattr(response, 'status_code', None)
        if _is_status(status_code):
            return status_code

        return None

    @classmethod
    def is_network_error(cls, error: BaseException) -> bool:
        """Detect connection, DNS and TLS level failures."""
        if isinstance(error, cls.NETWORK_ERROR_TYPES):
            return True

        if isinstance(error, OSError):
            try:
                message = str(error).lower()
            except Exception:
                return False
            return any(pattern in message for pattern in cls.NETWORK_ERROR_PATTERNS)

        return False


def _is_status(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def default_should_retry(error: BaseException) -> ErrorClassification:
    """Default classifier used by :class:`FallbackModel`."""
    return ErrorClassifier.classify(error)
