"""xAI Grok adapter over raw HTTPS (no SDK)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider
from tasks_api.core.errors import LLMAppError

logger = logging.getLogger(__name__)

GROK_PERSONA = (
    "You are Grok, a chatbot inspired by the Hitchhiker's Guide to the Galaxy."
)


class GrokClient(AbstractAIClient):
    """Post chat completions to the xAI API with bearer authentication."""

    provider = AIProvider.GROK
    display_name = "Grok"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str = "https://api.x.ai/v1",
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(api_key=api_key, model=model, timeout_seconds=timeout_seconds)
        self.api_url = f"{base_url.rstrip('/')}/chat/completions"

    def _build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": GROK_PERSONA},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0,
        }

    async def _post_chat(self, prompt: str) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            resp = await client.post(
                self.api_url,
                json=self._build_payload(prompt),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
            resp.raise_for_status()
            return resp.json()

    async def _complete(self, prompt: str) -> str | None:
        data = await self._post_chat(prompt)
        choices = data.get("choices") or []
        if not choices:
            return None
        message = choices[0].get("message") or {}
        content = message.get("content")
        return content if isinstance(content, str) else None

    async def fetch_raw(self, prompt: str) -> dict[str, Any]:
        """Return Grok's JSON body untouched.

        Args:
            prompt: Fully built prompt text.

        Returns:
            The decoded response body.

        Raises:
            LLMAppError: If the key is missing or the call fails.
        """
        if not self.is_configured:
            raise LLMAppError(
                code="llm_missing_api_key",
                message=f"{self.display_name} API key not configured",
                details={"provider": self.provider.value},
            )

        try:
            return await self._post_chat(prompt)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "ai.provider.error",
                extra={
                    "provider": self.provider.value,
                    "model": self.model,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise LLMAppError(
                code="llm_provider_error",
                message=str(exc) or f"{self.display_name} API error",
                details={"provider": self.provider.value},
            ) from exc
