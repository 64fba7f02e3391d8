"""Unit tests for the default error classifier."""

import socket
import ssl

import httpx
import pytest

from fallback_llm_sdk.providers.base import ProviderError
from fallback_llm_sdk.reliability.error_classifier import (
    ErrorClassification,
    ErrorClassifier,
    default_should_retry,
)
from tests.helpers.mock_exceptions import (
    MockAPIError,
    MockAuthenticationError,
    MockBadRequestError,
    MockHTTPResponse,
    MockInternalServerError,
    MockRateLimitError,
)


def _http_status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://mock.api/v1/chat")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestStatusCodes:
    """Classification driven by HTTP-style status codes."""

    def test_rate_limit_falls_back(self):
        assert default_should_retry(MockRateLimitError()) == ErrorClassification.FALLBACK

    def test_rate_limit_ignores_retryable_flag(self):
        error = ProviderError("quota", provider="mock", status_code=429, is_retryable=True)
        assert default_should_retry(error) == ErrorClassification.FALLBACK

    @pytest.mark.parametrize("status_code", list(range(500, 600)))
    def test_server_errors_retry(self, status_code):
        error = ProviderError("boom", provider="mock", status_code=status_code)
        assert default_should_retry(error) == ErrorClassification.RETRY

    @pytest.mark.parametrize("status_code", [s for s in range(400, 500) if s != 429])
    def test_client_errors_throw(self, status_code):
        error = ProviderError("bad", provider="mock", status_code=status_code)
        assert default_should_retry(error) == ErrorClassification.THROW

    def test_status_from_response_attribute(self):
        assert default_should_retry(MockInternalServerError(status_code=503)) == ErrorClassification.RETRY
        assert default_should_retry(MockAuthenticationError()) == ErrorClassification.THROW
        assert default_should_retry(MockBadRequestError()) == ErrorClassification.THROW

    @pytest.mark.parametrize("status_code,expected", [
        (429, ErrorClassification.FALLBACK),
        (502, ErrorClassification.RETRY),
        (404, ErrorClassification.THROW),
    ])
    def test_httpx_status_errors(self, status_code, expected):
        assert default_should_retry(_http_status_error(status_code)) == expected

    def test_boolean_status_is_ignored(self):
        error = Exception("odd")
        error.status_code = True
        assert ErrorClassifier.get_status_code(error) is None


class TestRetryableFlag:
    """Explicit retryable flag on errors."""

    def test_retryable_flag_without_status(self):
        error = ProviderError("transient", provider="mock", is_retryable=True)
        assert default_should_retry(error) == ErrorClassification.RETRY

    def test_retryable_flag_beats_client_status(self):
        error = MockAPIError("conflict", MockHTTPResponse(409), is_retryable=True)
        assert default_should_retry(error) == ErrorClassification.RETRY

    def test_non_retryable_without_status_throws(self):
        error = ProviderError("nope", provider="mock")
        assert default_should_retry(error) == ErrorClassification.THROW


class TestNetworkErrors:
    """Transport level failures are retried on the same model."""

    @pytest.mark.parametrize("error", [
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("read timed out"),
        httpx.RemoteProtocolError("peer closed connection"),
        ConnectionResetError("reset by peer"),
        ConnectionRefusedError(),
        socket.gaierror(-2, "Name or service not known"),
        ssl.SSLError("handshake failure"),
    ])
    def test_transport_types_retry(self, error):
        assert default_should_retry(error) == ErrorClassification.RETRY

    def test_oserror_with_network_message_retries(self):
        error = OSError("[Errno 101] Network is unreachable")
        assert default_should_retry(error) == ErrorClassification.RETRY

    def test_oserror_without_network_message_throws(self):
        error = OSError("[Errno 28] No space left on device")
        assert default_should_retry(error) == ErrorClassification.THROW

    def test_network_words_outside_oserror_throw(self):
        assert default_should_retry(ValueError("connection refused")) == ErrorClassification.THROW


class TestUnknownErrors:
    """Unrecognised failures are fatal."""

    @pytest.mark.parametrize("error", [
        ValueError("bad value"),
        KeyError("missing"),
        RuntimeError("unexpected"),
        TypeError("fetch failed"),
    ])
    def test_unknown_errors_throw(self, error):
        assert default_should_retry(error) == ErrorClassification.THROW

    @pytest.mark.parametrize("error", [
        MockRateLimitError(),
        MockInternalServerError(),
        MockAuthenticationError(),
        httpx.ConnectError("connection refused"),
        ValueError("bad value"),
    ])
    def test_classification_is_deterministic(self, error):
        assert default_should_retry(error) == default_should_retry(error)

    def test_classification_values(self):
        assert {c.value for c in ErrorClassification} == {"retry", "fallback", "throw"}
