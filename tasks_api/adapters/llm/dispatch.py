"""Provider-agnostic entry point for text generation."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider, GenerationOutcome
from tasks_api.adapters.llm.factory import create_ai_clients, parse_provider
from tasks_api.adapters.llm.prompts import PROMPT_VERSION, build_prompt
from tasks_api.core.errors import ValidationAppError

logger = logging.getLogger(__name__)


class AIDispatcher:
    """Route generation requests to the adapter registered for a provider.

    The registry is fixed at construction. Callers get a GenerationOutcome
    back for every call, including unknown providers and provider faults.
    """

    def __init__(self, clients: Mapping[AIProvider, AbstractAIClient]) -> None:
        self._clients = dict(clients)

    @classmethod
    def from_settings(cls) -> "AIDispatcher":
        return cls(create_ai_clients())

    @property
    def providers(self) -> list[AIProvider]:
        return list(self._clients)

    def client_for(self, provider: str | AIProvider) -> AbstractAIClient:
        """Return the adapter for ``provider``.

        Raises:
            ValidationAppError: If the provider is unknown or not registered.
        """
        resolved = parse_provider(provider)
        client = self._clients.get(resolved)
        if client is None:
            raise ValidationAppError(
                code="llm_provider_unavailable",
                message=f"AI provider '{resolved.value}' is not available",
                details={"provider": resolved.value},
            )
        return client

    async def generate(
        self,
        provider: str | AIProvider,
        prompt: str,
        user_context: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> GenerationOutcome:
        """Build the composite prompt and generate content with ``provider``.

        Args:
            provider: Provider identifier.
            prompt: User-written instruction.
            user_context: Optional data about the requesting user.
            metadata: Optional request metadata (category, tone, audience...).

        Returns:
            GenerationOutcome from the selected provider.
        """
        try:
            composite = build_prompt(prompt, user_context, metadata)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "ai.prompt.render_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            return GenerationOutcome.fail(f"Could not render prompt: {exc}")
        return await self.complete(provider, composite)

    async def complete(self, provider: str | AIProvider, prompt: str) -> GenerationOutcome:
        """Send ``prompt`` to ``provider`` as-is (no framing or context)."""
        try:
            client = self.client_for(provider)
        except ValidationAppError as exc:
            return GenerationOutcome.fail(exc.message)

        start = time.perf_counter()
        outcome = await client.generate(prompt)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "ai.generate.completed" if outcome.success else "ai.generate.failed",
            extra={
                "provider": client.provider.value,
                "model": client.model,
                "prompt_version": PROMPT_VERSION,
                "prompt_chars": len(prompt),
                "success": outcome.success,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return outcome
