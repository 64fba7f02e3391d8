"""Shared pytest fixtures for Fallback LLM SDK tests."""

import os

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

from fallback_llm_sdk.models.conversation_types import ConversationMessage, TurnRole as ConversationRole
from fallback_llm_sdk.models.generation import GenerationParams
from fallback_llm_sdk.reliability.cancellation import CancellationToken
from tests.helpers.fake_providers import FakeProvider, FixedRandom
from tests.helpers.mock_exceptions import (
    MockAuthenticationError,
    MockInternalServerError,
    MockRateLimitError,
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: tests over HTTP adapters with mocked transports")
    config.addinivalue_line("markers", "slow: tests that wait on real timers")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in item.nodeid.split("/"):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_fallback_env(monkeypatch):
    """Keep FALLBACK_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("FALLBACK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_generation_params():
    """Sample generation parameters."""
    return GenerationParams(max_tokens=100, temperature=0.2)


@pytest.fixture
def sample_conversation_messages():
    """Sample conversation messages."""
    return [
        ConversationMessage(
            role=ConversationRole.SYSTEM,
            content="You are a helpful assistant."
        ),
        ConversationMessage(
            role=ConversationRole.USER,
            content="What is the weather like?"
        ),
    ]


@pytest.fixture
def cancel_token():
    return CancellationToken()


@pytest.fixture
def fixed_rng():
    """Jitter source pinned to the bottom of the range."""
    return FixedRandom(0.0)


@pytest.fixture
def healthy_provider():
    return FakeProvider("primary")


@pytest.fixture
def rate_limited_provider():
    return FakeProvider("rate-limited", fail_forever=MockRateLimitError("Rate limited on rate-limited"))


@pytest.fixture
def unstable_provider():
    return FakeProvider("unstable", fail_forever=MockInternalServerError("Server error on unstable"))


@pytest.fixture
def unauthorized_provider():
    return FakeProvider("unauthorized", fail_forever=MockAuthenticationError())


@pytest.fixture
def backup_provider():
    return FakeProvider("backup")
