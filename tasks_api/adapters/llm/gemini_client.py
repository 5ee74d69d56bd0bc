"""Google Gemini adapter (google-genai SDK)."""

from __future__ import annotations

from google import genai
from google.genai import types

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider
from tasks_api.core.errors import LLMAppError


class GeminiClient(AbstractAIClient):
    """Call Gemini ``generate_content`` with the prompt as flat contents.

    Gemini returns the generated text on the response's ``text`` field rather
    than in a list of choices.
    """

    provider = AIProvider.GEMINI
    display_name = "Gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(api_key=api_key, model=model, timeout_seconds=timeout_seconds)
        self.client: genai.Client | None = None
        if self.api_key:
            self.client = genai.Client(
                api_key=self.api_key,
                # HttpOptions.timeout is expressed in milliseconds
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )

    async def _complete(self, prompt: str) -> str | None:
        if self.client is None:
            raise LLMAppError(
                code="llm_client_not_initialized",
                message=f"{self.display_name} client not initialized",
                details={"provider": self.provider.value},
            )
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        return response.text
