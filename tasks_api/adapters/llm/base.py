from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

logger = logging.getLogger(__name__)


class AIProvider(str, Enum):
    """Closed set of supported text-generation backends."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    GROK = "grok"


@dataclass(frozen=True)
class GenerationOutcome:
    """Normalized result of a provider call.

    ``data`` carries the generated text when ``success`` is True; otherwise
    ``error`` carries a human-readable reason.
    """

    success: bool
    data: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: str) -> "GenerationOutcome":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "GenerationOutcome":
        return cls(success=False, error=error)


class AbstractAIClient(ABC):
    """Interface for provider adapters that turn a prompt into generated text.

    Subclasses only implement the wire call (``_complete``). Credential
    pre-flight, empty-response detection and failure mapping live here so every
    provider reports errors the same way.
    """

    provider: ClassVar[AIProvider]
    display_name: ClassVar[str]

    def __init__(self, *, api_key: str | None, model: str, timeout_seconds: float) -> None:
        self.api_key = api_key or None
        self.model = model
        self.timeout_seconds = timeout_seconds

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None

    @abstractmethod
    async def _complete(self, prompt: str) -> str | None:
        """Send ``prompt`` as the user turn and return the generated text.

        Args:
            prompt: Fully built prompt text.

        Returns:
            The text extracted from the provider's native response, or None
            when the response carries none.

        Raises:
            Exception: Any SDK, network or HTTP failure; mapped by ``generate``.
        """
        ...

    async def generate(self, prompt: str) -> GenerationOutcome:
        """Generate text for ``prompt``. Never raises.

        Args:
            prompt: Fully built prompt text.

        Returns:
            GenerationOutcome with the generated text or a failure reason.
        """
        if not self.is_configured:
            logger.warning(
                "ai.provider.not_configured",
                extra={"provider": self.provider.value},
            )
            return GenerationOutcome.fail(f"{self.display_name} API key not configured")

        try:
            text = await self._complete(prompt)
        except Exception as exc:
            logger.warning(
                "ai.provider.error",
                extra={
                    "provider": self.provider.value,
                    "model": self.model,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return GenerationOutcome.fail(str(exc) or f"{self.display_name} API error")

        if not isinstance(text, str) or not text:
            logger.warning(
                "ai.provider.empty_response",
                extra={"provider": self.provider.value, "model": self.model},
            )
            return GenerationOutcome.fail(f"No content generated from {self.display_name}")

        return GenerationOutcome.ok(text)
