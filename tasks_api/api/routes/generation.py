from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from tasks_api.adapters.llm.dispatch import AIDispatcher
from tasks_api.core.auth import verify_api_key
from tasks_api.schemas.generation import (
    ApiResponse,
    GeneratedContent,
    GenerateRequest,
    GrokRawRequest,
    ImprovedPrompt,
    ImprovePromptRequest,
    SuperPromptRequest,
    SuperPromptResult,
)
from tasks_api.services.generation_service import GenerationService

router = APIRouter(tags=["AI"], dependencies=[Depends(verify_api_key)])

# Provider clients are resolved once per process and reused across requests
_generation_service = GenerationService(AIDispatcher.from_settings())


def get_generation_service() -> GenerationService:
    return _generation_service


@router.post("/generate", response_model=ApiResponse[GeneratedContent])
async def generate_content(
    body: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ApiResponse[GeneratedContent]:
    """Generate task content from a prompt with the selected provider.

    Raises:
        ValidationAppError: 400 if the prompt is blank or too long.
        LLMAppError: 500 if the provider fails or returns no content.
    """
    result = await service.generate_task_content(body)
    return ApiResponse[GeneratedContent](data=result, message="Content generated successfully")


@router.post("/prompts/super", response_model=ApiResponse[SuperPromptResult])
async def generate_super_prompt(
    body: SuperPromptRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ApiResponse[SuperPromptResult]:
    """Expand a task plus guiding answers into a ready-to-use super prompt."""
    result = await service.generate_super_prompt(body)
    return ApiResponse[SuperPromptResult](data=result, message="Super prompt generated successfully")


@router.post("/prompts/improve", response_model=ApiResponse[ImprovedPrompt])
async def improve_prompt(
    body: ImprovePromptRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ApiResponse[ImprovedPrompt]:
    result = await service.improve_prompt(body)
    return ApiResponse[ImprovedPrompt](data=result, message="Prompt improved successfully")


@router.post("/grok", response_model=ApiResponse[dict[str, Any]])
async def grok_raw(
    body: GrokRawRequest,
    service: GenerationService = Depends(get_generation_service),
) -> ApiResponse[dict[str, Any]]:
    """Return Grok's response body as-is, without text extraction."""
    raw = await service.grok_passthrough(body.prompt, body.user_context, body.metadata)
    return ApiResponse[dict[str, Any]](data={"response": raw}, message="Response generated successfully")
