"""
Example: Fallback Chain

This example wraps three adapters into one model. The primary is rate
limited, the secondary has a flaky server, and the local model always
answers. Observers print what the chain does along the way.

The adapters here are scripted so the example runs without API keys.
"""

import asyncio
import logging

from fallback_llm_sdk import (
    AllModelsExhaustedError,
    CancellationToken,
    GenerationResponse,
    ProviderAdapter,
    ProviderError,
    create_fallback_model,
)
from fallback_llm_sdk.models.events import StreamCompleteEvent, StreamDeltaEvent


class ScriptedProvider(ProviderAdapter):
    """Adapter that fails with the given status codes before answering."""

    def __init__(self, provider: str, model_id: str, statuses=()):
        self._provider = provider
        self._model_id = model_id
        self._statuses = list(statuses)

    def get_provider_name(self) -> str:
        return self._provider

    @property
    def model_id(self) -> str:
        return self._model_id

    def _check(self):
        if self._statuses:
            status = self._statuses.pop(0)
            raise ProviderError(f"HTTP {status}", self._provider, status_code=status)

    async def generate(self, messages, params=None, *, cancel_token=None):
        self._check()
        return GenerationResponse(
            text=f"{self._model_id} says hello",
            model=self._model_id,
            provider=self._provider,
        )

    async def stream(self, messages, params=None, *, cancel_token=None):
        self._check()
        return self._chunks()

    async def _chunks(self):
        for word in ("streamed", "by", self._model_id):
            yield StreamDeltaEvent(delta=word + " ", model=self._model_id)
        yield StreamCompleteEvent(finish_reason="stop", model=self._model_id)


def build_chain():
    return create_fallback_model(
        [
            ScriptedProvider("openai", "gpt-4o-mini", statuses=[429] * 10),
            ScriptedProvider("anthropic", "claude-3-haiku", statuses=[503, 503, 503]),
            ScriptedProvider("local", "llama-3-8b"),
        ],
        max_retries_per_model=2,
        base_delay_ms=100,
        on_retry=lambda e: print(f"  retry {e.attempt}/{e.max_retries} on {e.model.model_id} in {e.delay_ms}ms"),
        on_fallback=lambda e: print(f"  {e.failed_model.model_id} -> {e.next_model.model_id}"),
    )


async def example_generate():
    """One-shot generation through the chain."""
    print("=== Generate ===\n")

    model = build_chain()
    print(f"Chain: {model.model_id}")

    response = await model.generate("Say hello")
    print(f"\n{response.provider}/{response.model}: {response.text}")


async def example_stream():
    """Streaming falls back only until a stream is open."""
    print("\n=== Stream ===\n")

    model = build_chain()
    async for chunk in model.generate_stream("Say hello"):
        if isinstance(chunk, StreamDeltaEvent):
            print(chunk.get_text(), end="", flush=True)
    print()


async def example_exhausted():
    """Every model fails."""
    print("\n=== Exhausted ===\n")

    model = create_fallback_model([
        ScriptedProvider("openai", "gpt-4o-mini", statuses=[429]),
        ScriptedProvider("anthropic", "claude-3-haiku", statuses=[500]),
    ])

    try:
        await model.generate("Say hello")
    except AllModelsExhaustedError as e:
        print(e)


async def example_cancel():
    """Cancelling while the chain is backing off."""
    print("\n=== Cancel ===\n")

    token = CancellationToken()
    model = create_fallback_model(
        [ScriptedProvider("anthropic", "claude-3-haiku", statuses=[503] * 5)],
        max_retries_per_model=3,
        base_delay_ms=5000,
    )

    loop = asyncio.get_running_loop()
    loop.call_later(0.2, token.cancel, TimeoutError("user gave up"))

    try:
        await model.generate("Say hello", cancel_token=token)
    except TimeoutError as e:
        print(f"Cancelled: {e}")


async def main():
    logging.basicConfig(level=logging.WARNING)

    await example_generate()
    await example_stream()
    await example_exhausted()
    await example_cancel()


if __name__ == "__main__":
    asyncio.run(main())
