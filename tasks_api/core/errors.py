"""Application-level exception types.

Services and adapters raise these; ``core.exception_handlers`` turns them into
the failure envelope. Provider faults inside ``AbstractAIClient.generate`` are
reported as failed outcomes instead and only become ``LLMAppError`` at the
service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Optional context returned to clients under ``details``."""

    hint: str
    provider: str
    max_value: int
    actual_value: int


@dataclass
class AppError(Exception):
    """Base error carrying a stable code and a client-facing message.

    Attributes:
        code: Machine-readable error code (e.g. ``prompt_required``).
        message: Human-readable error message.
        details: Optional structured context.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Caller input rejected before any provider I/O (HTTP 400)."""


class LLMAppError(AppError):
    """AI provider call failed or produced nothing usable (HTTP 500)."""


class AuthenticationAppError(AppError):
    """API key missing, invalid or not configured (HTTP 401)."""
