"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, and automatic API
test skipping. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

from polychat.config import Config
from polychat.providers.models import ChatTurn, HistoryMessage

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_search_env(request, monkeypatch):
    """Ensure a clean search environment for each test.

    Clears TAVILY_* env vars so web search defaults to the instant-answer
    backend unless a test opts in.
    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("TAVILY_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


# =============================================================================
# Shared Fixtures
# =============================================================================

# A 1x1 transparent PNG.
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
PNG_DATA_URL = f"data:image/png;base64,{PNG_BASE64}"


def make_turn(
    provider: str = "OpenAI",
    *,
    model_id: str = "test-model",
    message: str = "Hello there",
    image: str | None = None,
    history: list[tuple[str, str]] | None = None,
    web_search: bool = False,
) -> ChatTurn:
    """Build a ChatTurn with terse history tuples."""
    return ChatTurn(
        provider=provider,
        model_id=model_id,
        message=message,
        image=image,
        history=tuple(HistoryMessage(role=r, content=t) for r, t in history or []),
        web_search=web_search,
    )


@pytest.fixture
def config() -> Config:
    """Config without a search key and with short timeouts."""
    return Config(search_api_key="", request_timeout_s=5.0, search_timeout_s=5.0)


@pytest.fixture
def tavily_config() -> Config:
    """Config with a search key, so web search uses Tavily."""
    return Config(search_api_key="tvly-test", request_timeout_s=5.0)
