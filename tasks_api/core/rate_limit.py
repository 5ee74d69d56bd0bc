"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Admission runs before anything else: the dependency is registered app-wide,
  ahead of authentication and route dependencies.
- Swap-friendly: storage backend can be replaced (e.g., Redis) behind an
  abstract interface.

Rate limiting strategy:
- Fixed-window limit per client address taken from proxy headers.
- Clients without any proxy header share the "unknown" bucket.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import HTTPException, Request, status

from tasks_api.adapters.rate_limit.base import AbstractRateLimiter
from tasks_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from tasks_api.core.config import settings
from tasks_api.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

# Checked in order; the first non-empty value wins
CLIENT_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")

RATE_LIMIT_EXCEEDED_MESSAGE = "Rate limit exceeded. Please try again later."

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryFixedWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        _limiter_config = config

    return _limiter


def reset_rate_limiter() -> None:
    """Drop the cached limiter so the next request starts with empty state."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


def get_client_ip(request: Request) -> str:
    """Derive the rate limit key from forwarding headers.

    ``X-Forwarded-For`` may hold a chain of addresses; the first one is the
    originating client.
    """

    for header in CLIENT_IP_HEADERS:
        value = request.headers.get(header)
        if not value:
            continue
        if header == "x-forwarded-for":
            value = value.split(",")[0]
        value = value.strip()
        if value:
            return value

    return UNKNOWN_CLIENT


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing per-client rate limits.

    Raises:
        HTTPException: 429 Too Many Requests when the client's window is used up.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_rate_limiter()
    client_id = get_client_ip(request)
    result = limiter.check(client_id)

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_identifier(client_id),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_identifier(client_id),
            "client_unknown": client_id == UNKNOWN_CLIENT,
            "limit": result.limit,
            "window_s": settings.app.rate_limit_window_seconds,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(int(result.reset_at))

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=RATE_LIMIT_EXCEEDED_MESSAGE,
        headers=headers or None,
    )


async def run_rate_limit_sweeper(interval_seconds: float | None = None) -> None:
    """Purge expired limiter entries every ``interval_seconds`` until cancelled.

    Defaults to the configured window length.
    """

    interval = interval_seconds or settings.app.rate_limit_window_seconds
    while True:
        await asyncio.sleep(interval)
        removed = get_rate_limiter().purge_expired()
        if removed:
            logger.debug("rate_limit.purged", extra={"removed": removed})
