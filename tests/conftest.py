"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that loads settings, so the
suite never depends on a developer's .env file or real provider credentials.
"""

import os

os.environ["APP_ENV"] = "testing"

os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LOG_LEVEL", "WARNING")
for _provider in ("OPENAI", "CLAUDE", "GEMINI", "GROK"):
    os.environ.pop(f"AI_{_provider}_API_KEY", None)

import pytest

from tasks_api.core.rate_limit import reset_rate_limiter


@pytest.fixture(autouse=True)
def fresh_rate_limiter():
    """Give every test an empty limiter; TestClient requests share one bucket."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()


@pytest.fixture
def valid_api_key_headers() -> dict[str, str]:
    return {"X-API-Key": "test-api-key-123"}
