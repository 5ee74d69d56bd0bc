"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from tasks_api.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    hash_identifier,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired with the redaction filter and JSON formatter."""

    def _build(name: str) -> tuple[logging.Logger, StringIO]:
        logger = logging.getLogger(name)
        logger.setLevel(logging.INFO)
        logger.handlers.clear()
        logger.propagate = False

        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.addFilter(RequestIdFilter())
        handler.addFilter(SensitiveDataFilter())
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        return logger, stream

    return _build


def test_sensitive_filter_redacts_api_keys(capture):
    """Ensure SensitiveDataFilter redacts API key fields."""
    logger, stream = capture("test_redaction")

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "x-api-key": "another-secret",
            "grok_api_key": "xai-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()

    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "xai-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_prompt_content(capture):
    """Prompts, user context and metadata never reach the log stream."""
    logger, stream = capture("test_prompt_redaction")

    logger.info(
        "generation_event",
        extra={
            "prompt": "Plan a layoff announcement for Jane Doe",
            "user_context": {"email": "jane@example.com"},
            "metadata": {"tone": "confidential"},
            "prompt_chars": 40,
        },
    )

    output = stream.getvalue()

    assert "Jane Doe" not in output
    assert "jane@example.com" not in output
    assert "confidential" not in output
    assert "prompt_chars" in output


def test_sensitive_filter_allows_safe_fields(capture):
    """Verify safe fields pass through unmodified."""
    logger, stream = capture("test_safe_fields")

    logger.info(
        "safe_event",
        extra={
            "request_id": "req-123",
            "provider": "gemini",
            "status_code": 200,
            "duration_ms": 150.5,
        },
    )

    data = json.loads(stream.getvalue())

    assert data["request_id"] == "req-123"
    assert data["provider"] == "gemini"
    assert data["status_code"] == 200
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(capture):
    """Ensure nested sensitive fields are redacted."""
    logger, stream = capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "x-api-key": "secret-key",
                "user-agent": "pytest",
            },
            "safe_data": {
                "count": 5,
                "type": "test",
            },
        },
    )

    data = json.loads(stream.getvalue())

    assert data["headers"] == {"x-api-key": "[REDACTED]", "user-agent": "pytest"}
    assert data["safe_data"] == {"count": 5, "type": "test"}


def test_request_id_from_context(capture):
    logger, stream = capture("test_request_id")

    set_request_id("ctx-42")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "ctx-42"


def test_hash_identifier_is_short_and_stable():
    digest = hash_identifier("1.2.3.4")

    assert digest == hash_identifier("1.2.3.4")
    assert digest != hash_identifier("1.2.3.5")
    assert len(digest) == 16
    assert "1.2.3.4" not in digest
