"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Windows start at a client's first request, not on wall-clock boundaries.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from tasks_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_MAX_REQUESTS = 100


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window request counter keyed by client identifier.

    The first request from an unseen (or expired) client opens a window of
    ``window_seconds``; up to ``limit`` requests are admitted until it expires.
    A burst straddling two windows can therefore see up to ``2 * limit``
    admissions, which is acceptable for coarse abuse protection.

    Important:
        This limiter is per-process only. If the API runs with multiple workers,
        each worker enforces its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, RateLimitEntry] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _allowed(self, *, remaining: int, reset_at: float) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=remaining,
            reset_at=reset_at,
            retry_after_seconds=None,
        )

    def _blocked(self, *, now: float, reset_at: float) -> RateLimitResult:
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=reset_at,
            retry_after_seconds=max(0, int(math.ceil(reset_at - now))),
        )

    def check(self, client_id: str) -> RateLimitResult:
        """Count one request for ``client_id`` and decide admission.

        Raises:
            ValueError: If client_id is empty.
        """
        if not client_id:
            raise ValueError("client_id must be a non-empty string")

        with self._lock:
            now = self._clock()
            entry = self._entries.get(client_id)

            if entry is None or now >= entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + self._window_seconds)
                self._entries[client_id] = entry
                return self._allowed(remaining=self._limit - 1, reset_at=entry.reset_at)

            if entry.count < self._limit:
                entry.count += 1
                return self._allowed(
                    remaining=self._limit - entry.count, reset_at=entry.reset_at
                )

            return self._blocked(now=now, reset_at=entry.reset_at)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
            return len(expired)
