"""
Shared test fixtures for the HomeFinder backend test suite.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import structlog
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment from leaking a real Repliers key into tests."""
    monkeypatch.delenv("REPLIERS_API_KEY", raising=False)
    monkeypatch.setenv("DEBUG", "false")


@pytest.fixture(autouse=True)
def _configure_structlog_for_tests():
    """Configure structlog for tests using a simple, deterministic setup."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def mock_http_client() -> MagicMock:
    """Stand-in for httpx.AsyncClient. Tests set return values on post/get."""
    http_client = MagicMock(spec=httpx.AsyncClient)
    http_client.post = AsyncMock()
    http_client.get = AsyncMock()
    http_client.aclose = AsyncMock()
    return http_client


@pytest.fixture
def nlp_body() -> dict:
    """A successful NLP endpoint payload for a simple GET query."""
    return {
        "conversationId": "abc",
        "summary": "3bd condos in Toronto",
        "request": {"url": "https://x/listings?city=Toronto&beds=3"},
    }


@pytest.fixture
def client() -> TestClient:
    """FastAPI TestClient wrapping the main application."""
    # Clear the lru_cache so settings pick up test env vars
    from homefinder.config import get_settings

    get_settings.cache_clear()

    from homefinder.main import app

    return TestClient(app)
