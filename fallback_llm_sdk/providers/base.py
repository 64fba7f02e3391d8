"""
Base Provider Adapter Interface

This module defines the abstract base class for every model that can take part
in a fallback chain. Concrete adapters (OpenAI, Anthropic, a local server, ...)
live outside this package; the fallback layer only relies on the contract
below, and :class:`~fallback_llm_sdk.providers.fallback.FallbackModel`
implements the same contract so a chain can be used anywhere a single model
is expected.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, List, Optional, Pattern, Union

from ..models.conversation_types import ConversationMessage
from ..models.generation import GenerationParams, GenerationResponse

if TYPE_CHECKING:
    from ..reliability.cancellation import CancellationToken


Messages = Union[str, List[ConversationMessage]]


class ProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    An adapter is identified by ``(provider, model_id)`` and exposes two
    asynchronous operations:

    - ``generate``: one-shot completion, returns a :class:`GenerationResponse`
    - ``stream``: awaiting it opens the stream and returns a lazy, single-pass
      async iterator of chunks. Failures that happen before the stream is
      handed back must be raised from the ``await``.

    Adapters should raise :class:`ProviderError` (or any exception carrying a
    ``status_code``) for API failures so the fallback layer can classify them.
    """

    @property
    def provider(self) -> str:
        """Provider name used in logs, events and error summaries."""
        return self.get_provider_name()

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Model identifier used in logs, events and error summaries."""
        pass

    @property
    def supported_urls(self) -> Dict[str, List[Pattern[str]]]:
        """
        Media types this model accepts by URL.

        Maps a media-type pattern (e.g. ``"image/*"``) to the URL patterns the
        model can fetch itself. Defaults to none.
        """
        return {}

    @abstractmethod
    async def generate(
        self,
        messages: Messages,
        params: Optional[GenerationParams] = None,
        *,
        cancel_token: Optional["CancellationToken"] = None
    ) -> GenerationResponse:
        """
        Generate a completion.

        Args:
            messages: Either a string prompt or list of conversation messages
            params: Generation parameters
            cancel_token: Optional cooperative cancellation signal

        Returns:
            GenerationResponse with the generated text and usage

        Raises:
            ProviderError: For provider-specific errors (transport, API errors)
        """
        pass

    @abstractmethod
    async def stream(
        self,
        messages: Messages,
        params: Optional[GenerationParams] = None,
        *,
        cancel_token: Optional["CancellationToken"] = None
    ) -> AsyncIterator[Any]:
        """
        Open a streaming completion.

        Args:
            messages: Either a string prompt or list of conversation messages
            params: Generation parameters
            cancel_token: Optional cooperative cancellation signal

        Returns:
            An async iterator over output chunks. It can be consumed once.

        Raises:
            ProviderError: If the stream cannot be established
        """
        pass

    async def generate_stream(
        self,
        messages: Messages,
        params: Optional[GenerationParams] = None,
        *,
        cancel_token: Optional["CancellationToken"] = None
    ) -> AsyncIterator[Any]:
        """Open the stream and yield its chunks as they arrive."""
        chunks = await self.stream(messages, params, cancel_token=cancel_token)
        async for chunk in chunks:
            yield chunk

    def get_provider_name(self) -> str:
        """
        Get the name of this provider.

        By default, returns the class name without 'Provider' suffix.
        Override this method to provide a custom name.

        Returns:
            str: The provider name (e.g., "openai", "anthropic")
        """
        class_name = self.__class__.__name__
        if class_name.endswith("Provider"):
            return class_name[:-8].lower()
        return class_name.lower()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.provider}/{self.model_id}>"


class ProviderError(Exception):
    """
    Base exception for provider-related errors.

    This should be raised for:
    - API transport errors
    - Authentication failures
    - Rate limiting
    - Transient failures that may be retryable

    Attributes:
        message: Error message
        provider: Provider name
        status_code: HTTP status code if applicable
        retry_after: Seconds to wait before retry if applicable
        is_retryable: Whether this error should be retried
        original_error: The original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None,
        is_retryable: bool = False,
        original_error: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        self.is_retryable = is_retryable
        self.original_error = original_error
