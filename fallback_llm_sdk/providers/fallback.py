"""
Fallback chain provider.

:class:`FallbackModel` wraps an ordered list of provider adapters and presents
them as a single adapter. Each request walks the chain:

- failures classified RETRY are retried on the same model with exponential
  backoff, up to ``max_retries_per_model`` times, then the chain advances
- failures classified FALLBACK advance to the next model immediately
- failures classified THROW are re-raised unchanged
- when the last model gives up, :class:`AllModelsExhaustedError` is raised
  with every recorded failure

Models are never called concurrently for the same request.
"""

import random
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Pattern, Sequence, Tuple, TypeVar

from ..config.settings import FallbackSettings
from ..models.generation import GenerationParams, GenerationResponse
from ..observability.logging import ProviderLogger
from ..reliability.backoff import calculate_delay
from ..reliability.cancellation import CancellationToken, sleep
from ..reliability.error_classifier import ErrorClassification, ShouldRetry, default_should_retry
from ..reliability.errors import AllModelsExhaustedError, FailedAttempt, FallbackConfigurationError
from ..reliability.events import ErrorEvent, FallbackEvent, RetryEvent
from ..reliability.observers import FallbackEventManager, Observer
from .base import Messages, ProviderAdapter
from .utils import merge_supported_urls

T = TypeVar('T')

MODEL_ID_SEPARATOR = " -> "


class FallbackModel(ProviderAdapter):
    """
    Composite adapter that falls back across an ordered chain of models.

    Example:
        >>> model = FallbackModel(
        ...     [primary, secondary, local],
        ...     max_retries_per_model=1,
        ...     on_fallback=lambda e: print(e.failed_model.model_id, "->", e.next_model.model_id),
        ... )
        >>> response = await model.generate("Summarise this ticket")
    """

    def __init__(
        self,
        models: Sequence[ProviderAdapter],
        settings: Optional[FallbackSettings] = None,
        *,
        max_retries_per_model: Optional[int] = None,
        base_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
        provider: Optional[str] = None,
        model_id: Optional[str] = None,
        should_retry: Optional[ShouldRetry] = None,
        on_retry: Optional[Observer] = None,
        on_fallback: Optional[Observer] = None,
        on_error: Optional[Observer] = None,
        rng: Optional[Any] = None
    ):
        """
        Args:
            models: Ordered models, primary first. At least one is required.
            settings: Base settings; individual keyword arguments override it
            max_retries_per_model: Retries on the same model before moving on
            base_delay_ms: Base backoff delay between retries
            max_delay_ms: Backoff cap
            provider: Provider name of the composite (default "fallback")
            model_id: Model id of the composite (default: ids joined with " -> ")
            should_retry: Error classifier replacing the default policy
            on_retry: Called with a RetryEvent before each retry
            on_fallback: Called with a FallbackEvent before advancing
            on_error: Called with an ErrorEvent for every caught failure
            rng: Random source for backoff jitter (anything with ``random()``)

        Raises:
            FallbackConfigurationError: If ``models`` is empty
            pydantic.ValidationError: If a setting is out of range
        """
        chain: Tuple[ProviderAdapter, ...] = tuple(models)
        if not chain:
            raise FallbackConfigurationError("FallbackModel requires at least one model")

        overrides = {
            key: value for key, value in {
                'max_retries_per_model': max_retries_per_model,
                'base_delay_ms': base_delay_ms,
                'max_delay_ms': max_delay_ms,
                'provider': provider,
                'model_id': model_id,
            }.items() if value is not None
        }
        base_settings = settings or FallbackSettings()
        if overrides:
            # Rebuild rather than model_copy so overrides are validated
            base_settings = FallbackSettings(**{**base_settings.model_dump(), **overrides})

        self.settings = base_settings
        self._models = chain
        self._should_retry: ShouldRetry = should_retry or default_should_retry
        self._events = FallbackEventManager(
            on_retry=on_retry,
            on_fallback=on_fallback,
            on_error=on_error,
        )
        self._rng = rng if rng is not None else random
        self._supported_urls = merge_supported_urls(chain)
        self._logger = ProviderLogger(self.settings.provider)

    @property
    def models(self) -> Tuple[ProviderAdapter, ...]:
        """The chain, primary first."""
        return self._models

    @property
    def provider(self) -> str:
        return self.settings.provider

    @property
    def model_id(self) -> str:
        if self.settings.model_id is not None:
            return self.settings.model_id
        return MODEL_ID_SEPARATOR.join(model.model_id for model in self._models)

    @property
    def supported_urls(self) -> Dict[str, List[Pattern[str]]]:
        return self._supported_urls

    async def generate(
        self,
        messages: Messages,
        params: Optional[GenerationParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None
    ) -> GenerationResponse:
        """Generate with the first model in the chain that succeeds."""
        return await self._execute_with_fallback(
            "generate",
            lambda model: model.generate(messages, params, cancel_token=cancel_token),
            cancel_token,
        )

    async def stream(
        self,
        messages: Messages,
        params: Optional[GenerationParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None
    ) -> AsyncIterator[Any]:
        """
        Open a stream on the first model in the chain that accepts it.

        Only failures raised while opening the stream take part in retry and
        fallback. Once a model has handed back its iterator, failures while
        iterating propagate to the caller: chunks already delivered cannot be
        taken back.
        """
        return await self._execute_with_fallback(
            "stream",
            lambda model: model.stream(messages, params, cancel_token=cancel_token),
            cancel_token,
        )

    async def _execute_with_fallback(
        self,
        method: str,
        operation: Callable[[ProviderAdapter], Awaitable[T]],
        cancel_token: Optional[CancellationToken]
    ) -> T:
        """Run ``operation`` against the chain until one model succeeds."""
        max_retries = self.settings.max_retries_per_model
        last_index = len(self._models) - 1
        errors: List[FailedAttempt] = []

        with self._logger.track_request(method, self.model_id) as request:
            request_id = request.request_id

            for model_index, model in enumerate(self._models):
                for attempt in range(max_retries + 1):
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    request.attempts += 1
                    try:
                        result = await operation(model)
                    except Exception as exc:
                        error = exc
                    else:
                        request.served_by = model.model_id
                        return result

                    # Cancellation wins over whatever the failure looks like
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    classification = ErrorClassification(self._should_retry(error))
                    self._logger.debug(
                        "Model call failed",
                        model=model.model_id,
                        request_id=request_id,
                        model_index=model_index,
                        classification=classification.value,
                        error_type=type(error).__name__
                    )
                    await self._events.emit_error(ErrorEvent(
                        model_index=model_index,
                        model=model,
                        error=error,
                        classification=classification,
                    ))

                    if classification is ErrorClassification.THROW:
                        raise error

                    errors.append(FailedAttempt(model, error))

                    if classification is ErrorClassification.RETRY and attempt < max_retries:
                        delay_ms = calculate_delay(
                            attempt,
                            self.settings.base_delay_ms,
                            self.settings.max_delay_ms,
                            self._rng,
                        )
                        self._logger.warning(
                            "Retrying model",
                            model=model.model_id,
                            request_id=request_id,
                            attempt=f"{attempt + 1}/{max_retries}",
                            delay_ms=delay_ms,
                            error=error
                        )
                        await self._events.emit_retry(RetryEvent(
                            model_index=model_index,
                            model=model,
                            attempt=attempt + 1,
                            max_retries=max_retries,
                            error=error,
                            delay_ms=delay_ms,
                        ))
                        await sleep(delay_ms, cancel_token)
                        continue

                    if model_index < last_index:
                        next_model = self._models[model_index + 1]
                        self._logger.warning(
                            f"Falling back to {next_model.provider}/{next_model.model_id}",
                            model=model.model_id,
                            request_id=request_id,
                            total_attempts=attempt + 1,
                            error=error
                        )
                        await self._events.emit_fallback(FallbackEvent(
                            failed_model_index=model_index,
                            failed_model=model,
                            next_model_index=model_index + 1,
                            next_model=next_model,
                            error=error,
                            total_attempts=attempt + 1,
                        ))
                    break

            raise AllModelsExhaustedError(errors) from errors[-1].error


def create_fallback_model(models: Sequence[ProviderAdapter], **options: Any) -> FallbackModel:
    """
    Create a fallback model.

    Accepts the same keyword options as :class:`FallbackModel`.
    """
    return FallbackModel(models, **options)
