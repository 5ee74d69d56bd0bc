"""OpenAI-compatible chat completion adapters (OpenAI and Claude)."""

from __future__ import annotations

from typing import Any, ClassVar

from openai import AsyncOpenAI

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider
from tasks_api.core.errors import LLMAppError

TASK_AGENT_PERSONA = (
    "You are a task assistant that helps professionals create actionable tasks."
)


class OpenAICompatibleClient(AbstractAIClient):
    """Adapter for providers speaking the OpenAI chat completions protocol.

    Uses the official OpenAI Python SDK with async support. SDK retries are
    disabled: one failed attempt is a terminal failure for the call.
    """

    system_prompt: ClassVar[str | None] = None

    def __init__(
        self,
        api_key: str | None,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the async SDK client when a credential is available.

        Args:
            api_key: Provider API key; None leaves the adapter unconfigured.
            model: Model name (e.g., "gpt-4o", "claude-sonnet-4-5").
            base_url: Optional custom base URL for the API.
            timeout_seconds: Timeout for requests in seconds.
        """
        super().__init__(api_key=api_key, model=model, timeout_seconds=timeout_seconds)
        self.base_url = base_url
        self.client: AsyncOpenAI | None = None
        if self.api_key:
            self.client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url,
                timeout=timeout_seconds,
                max_retries=0,
            )

    def _build_messages(self, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def _complete(self, prompt: str) -> str | None:
        if self.client is None:
            raise LLMAppError(
                code="llm_client_not_initialized",
                message=f"{self.display_name} client not initialized",
                details={"provider": self.provider.value},
            )
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": self._build_messages(prompt),
        }
        response = await self.client.chat.completions.create(**request_params)
        if not response.choices:
            return None
        return response.choices[0].message.content


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI chat completions with a fixed task-assistant persona."""

    provider = AIProvider.OPENAI
    display_name = "OpenAI"
    system_prompt = TASK_AGENT_PERSONA


class ClaudeClient(OpenAICompatibleClient):
    """Claude through Anthropic's OpenAI-compatible endpoint.

    Only the user turn is sent.
    """

    provider = AIProvider.CLAUDE
    display_name = "Claude"
