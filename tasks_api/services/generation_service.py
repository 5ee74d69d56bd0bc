"""Generation workflows built on the AI dispatch layer.

Handles:
- Input validation before any provider I/O
- Super prompt composition from task, category, tone, audience and Q&A answers
- Prompt improvement
- Mapping failed outcomes to LLMAppError for the HTTP layer
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tasks_api.adapters.llm.base import AIProvider, GenerationOutcome
from tasks_api.adapters.llm.dispatch import AIDispatcher
from tasks_api.adapters.llm.grok_client import GrokClient
from tasks_api.adapters.llm.prompts import PROMPT_VERSION, build_prompt
from tasks_api.core.config import settings
from tasks_api.core.errors import LLMAppError, ValidationAppError
from tasks_api.schemas.generation import (
    GeneratedContent,
    GenerateRequest,
    ImprovedPrompt,
    ImprovePromptRequest,
    SuperPromptContext,
    SuperPromptRequest,
    SuperPromptResult,
)

logger = logging.getLogger(__name__)

QUESTIONS_PREAMBLE = (
    "These are the questions and answers that should be involved in the prompt generation:\n"
)

IMPROVE_INSTRUCTIONS = (
    "Improve the following prompt so it is clearer, more specific and more actionable. "
    "Return only the improved prompt, with no extra text or details."
)


def format_question_key(key: str) -> str:
    """``"time_budget"`` → ``"Time budget"``."""
    return key[:1].upper() + key[1:].replace("_", " ")


def build_enhanced_task(request: SuperPromptRequest) -> str:
    """Spread category, tone, audience and Q&A answers into the task text."""
    enhanced = request.task.strip()

    category = request.category_name or request.category_id
    if category:
        enhanced += f"\n\nCategory: {category}"
    if request.tone:
        enhanced += f"\n\nTone: {request.tone}"
    if request.audience:
        enhanced += f"\n\nAudience: {request.audience}"

    if request.questions:
        enhanced += f"\n\n{QUESTIONS_PREAMBLE}"
        for key, value in request.questions.items():
            if value:
                enhanced += f"{format_question_key(key)}: {value}\n"

    return enhanced


def build_super_prompt_metadata(request: SuperPromptRequest) -> dict[str, Any]:
    """Caller metadata merged with the structured request fields."""
    return {
        **(request.metadata or {}),
        "category_id": request.category_id,
        "category_name": request.category_name,
        "task": request.task,
        "tone": request.tone,
        "audience": request.audience,
        "questions": request.questions,
    }


def build_improve_prompt(prompt: str) -> str:
    return f"{IMPROVE_INSTRUCTIONS}\n\nPrompt:\n{prompt.strip()}"


class GenerationService:
    """Orchestrates validation, dispatch and error mapping for generation endpoints.

    Attributes:
        dispatcher: Provider dispatch used for every call.
    """

    def __init__(self, dispatcher: AIDispatcher) -> None:
        self.dispatcher = dispatcher

    def _validate_prompt(self, text: str, field: str = "prompt") -> None:
        """Reject blank or oversized input before any provider I/O.

        Raises:
            ValidationAppError: If the text is blank or too long.
        """
        if not text or not text.strip():
            raise ValidationAppError(
                code=f"{field}_required",
                message=f"{field} is required",
            )

        max_chars = settings.app.max_prompt_chars
        if len(text) > max_chars:
            raise ValidationAppError(
                code=f"{field}_too_long",
                message=f"{field} exceeds the maximum length of {max_chars} characters",
                details={"max_value": max_chars, "actual_value": len(text)},
            )

    def _unwrap(self, outcome: GenerationOutcome, provider: AIProvider) -> str:
        if not outcome.success or not outcome.data:
            raise LLMAppError(
                code="ai_generation_failed",
                message=f"AI generation failed: {outcome.error or 'Unknown error'}",
                details={"provider": provider.value},
            )
        return outcome.data

    async def generate_task_content(self, request: GenerateRequest) -> GeneratedContent:
        """Generate task content with the requested provider.

        Raises:
            ValidationAppError: If the prompt is blank or too long.
            LLMAppError: If the provider fails or returns nothing.
        """
        self._validate_prompt(request.prompt)

        outcome = await self.dispatcher.generate(
            request.provider,
            request.prompt,
            user_context=request.user_context,
            metadata=request.metadata,
        )

        return GeneratedContent(
            provider=request.provider,
            content=self._unwrap(outcome, request.provider),
            prompt_version=PROMPT_VERSION,
        )

    async def generate_super_prompt(self, request: SuperPromptRequest) -> SuperPromptResult:
        """Compose an enhanced task prompt and have the provider expand it.

        Raises:
            ValidationAppError: If the task is blank or too long.
            LLMAppError: If the provider fails or returns nothing.
        """
        self._validate_prompt(request.task, field="task")

        outcome = await self.dispatcher.generate(
            request.provider,
            build_enhanced_task(request),
            user_context=request.user_context,
            metadata=build_super_prompt_metadata(request),
        )

        return SuperPromptResult(
            generated_prompt=self._unwrap(outcome, request.provider),
            ai_model=request.provider,
            questions=request.questions,
            context=SuperPromptContext(
                category_id=request.category_id,
                category_name=request.category_name,
                task=request.task,
                tone=request.tone,
                audience=request.audience,
            ),
        )

    async def improve_prompt(self, request: ImprovePromptRequest) -> ImprovedPrompt:
        """Rewrite a user prompt; the provider sees no task-generation framing."""
        self._validate_prompt(request.prompt)

        outcome = await self.dispatcher.complete(
            request.provider, build_improve_prompt(request.prompt)
        )

        return ImprovedPrompt(
            provider=request.provider,
            improved_prompt=self._unwrap(outcome, request.provider).strip(),
        )

    async def grok_passthrough(
        self,
        prompt: str,
        user_context: Mapping[str, Any] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return Grok's raw response body for the composed prompt.

        Raises:
            ValidationAppError: If the prompt is blank or too long.
            LLMAppError: If Grok is not configured or the call fails.
        """
        self._validate_prompt(prompt)

        client = self.dispatcher.client_for(AIProvider.GROK)
        if not isinstance(client, GrokClient):
            raise LLMAppError(
                code="llm_provider_unavailable",
                message="Grok raw responses are not available",
                details={"provider": AIProvider.GROK.value},
            )

        return await client.fetch_raw(build_prompt(prompt, user_context, metadata))
