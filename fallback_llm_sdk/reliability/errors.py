"""Errors raised by the fallback layer itself."""

from typing import TYPE_CHECKING, List, NamedTuple, Sequence, Tuple

if TYPE_CHECKING:
    from ..providers.base import ProviderAdapter


class FallbackConfigurationError(ValueError):
    """Invalid fallback chain configuration (e.g. no models)."""
    pass


class OperationCancelledError(Exception):
    """Raised when a request is cancelled through its CancellationToken."""

    def __init__(self, message: str = "Operation was cancelled"):
        super().__init__(message)


class FailedAttempt(NamedTuple):
    """A failure recorded against one model of the chain."""
    model: "ProviderAdapter"
    error: BaseException


class AllModelsExhaustedError(Exception):
    """
    Raised when every model in the fallback chain has been tried and failed.

    ``errors`` keeps every recorded failure, in the order it happened, so
    callers can inspect the original exceptions.
    """

    def __init__(self, errors: Sequence[FailedAttempt]):
        self.errors: Tuple[FailedAttempt, ...] = tuple(errors)
        super().__init__(f"All fallback models exhausted:\n{self.summary()}")

    def summary(self) -> str:
        """One indented line per failure: ``[i] provider/model_id: message``."""
        return '\n'.join(
            f"  [{i}] {attempt.model.provider}/{attempt.model.model_id}: {_describe(attempt.error)}"
            for i, attempt in enumerate(self.errors)
        )

    @property
    def last_error(self) -> BaseException:
        return self.errors[-1].error

    @property
    def models(self) -> Tuple["ProviderAdapter", ...]:
        """Models that failed, in chain order, each listed once."""
        seen: List["ProviderAdapter"] = []
        for attempt in self.errors:
            if not any(attempt.model is model for model in seen):
                seen.append(attempt.model)
        return tuple(seen)

    def __reduce__(self):
        return (self.__class__, (self.errors,))


def _describe(error: BaseException) -> str:
    message = str(error)
    return message if message else type(error).__name__
