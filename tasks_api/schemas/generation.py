"""Pydantic schemas for AI generation requests and responses."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from tasks_api.adapters.llm.base import AIProvider

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = Field(default=True, description="Always true for successful responses.")
    data: T = Field(..., description="Endpoint-specific payload.")
    message: str = Field(default="Success", description="Short human-readable status.")


class GenerateRequest(BaseModel):
    """Request to generate task content from a prompt."""

    provider: AIProvider = Field(
        default=AIProvider.OPENAI,
        description="Provider used to generate the content.",
    )
    prompt: str = Field(
        ...,
        min_length=1,
        description="Instruction describing the task to generate.",
    )
    user_context: dict[str, Any] | None = Field(
        default=None,
        description="Optional data about the requesting user (profile, goals, seniority).",
    )
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Optional request metadata such as category, tone or audience.",
    )


class GeneratedContent(BaseModel):
    provider: AIProvider
    content: str = Field(..., description="Generated text returned by the provider.")
    prompt_version: str = Field(..., description="Version of the prompt rendering used.")


class SuperPromptRequest(BaseModel):
    """Request to turn a task description plus Q&A answers into a super prompt."""

    provider: AIProvider = Field(default=AIProvider.OPENAI)
    task: str = Field(..., min_length=1, description="Task the prompt should accomplish.")
    category_id: str | None = None
    category_name: str | None = None
    tone: str | None = None
    audience: str | None = None
    questions: dict[str, str | None] | None = Field(
        default=None,
        description="Answers to guiding questions (e.g. goal, constraints, preferences).",
    )
    metadata: dict[str, Any] | None = None
    user_context: dict[str, Any] | None = None


class SuperPromptContext(BaseModel):
    category_id: str | None = None
    category_name: str | None = None
    task: str
    tone: str | None = None
    audience: str | None = None


class SuperPromptResult(BaseModel):
    generated_prompt: str
    ai_model: AIProvider
    questions: dict[str, str | None] | None = None
    context: SuperPromptContext


class ImprovePromptRequest(BaseModel):
    provider: AIProvider = Field(default=AIProvider.OPENAI)
    prompt: str = Field(..., min_length=1, description="Prompt to rewrite.")


class ImprovedPrompt(BaseModel):
    provider: AIProvider
    improved_prompt: str


class GrokRawRequest(BaseModel):
    """Request for the raw Grok passthrough endpoint."""

    prompt: str = Field(..., min_length=1)
    user_context: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
