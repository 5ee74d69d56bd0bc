"""Factory pattern for creating provider adapter instances."""

from __future__ import annotations

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider
from tasks_api.adapters.llm.gemini_client import GeminiClient
from tasks_api.adapters.llm.grok_client import GrokClient
from tasks_api.adapters.llm.openai_client import ClaudeClient, OpenAIClient
from tasks_api.core.config import AISettings, settings
from tasks_api.core.errors import ValidationAppError


def parse_provider(name: str | AIProvider) -> AIProvider:
    """Resolve a provider identifier.

    Args:
        name: Provider name (case-insensitive) or an AIProvider member.

    Returns:
        AIProvider: Matching provider.

    Raises:
        ValidationAppError: If the provider is not supported.
    """
    if isinstance(name, AIProvider):
        return name

    try:
        return AIProvider(str(name).strip().lower())
    except ValueError:
        supported = ", ".join(p.value for p in AIProvider)
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=f"Unknown AI provider: '{name}'. Supported providers: {supported}",
        ) from None


def create_ai_clients(ai_settings: AISettings | None = None) -> dict[AIProvider, AbstractAIClient]:
    """Build one adapter per provider from configuration.

    Providers without a credential are still built; they report
    "<Provider> API key not configured" on every call instead of failing here.

    Args:
        ai_settings: Provider settings; defaults to the global settings.

    Returns:
        Mapping from provider to its adapter instance.
    """
    cfg = ai_settings or settings.ai

    return {
        AIProvider.OPENAI: OpenAIClient(
            api_key=cfg.openai_api_key,
            model=cfg.openai_model,
            base_url=cfg.openai_base_url,
            timeout_seconds=cfg.timeout_seconds,
        ),
        AIProvider.CLAUDE: ClaudeClient(
            api_key=cfg.claude_api_key,
            model=cfg.claude_model,
            base_url=cfg.claude_base_url,
            timeout_seconds=cfg.timeout_seconds,
        ),
        AIProvider.GEMINI: GeminiClient(
            api_key=cfg.gemini_api_key,
            model=cfg.gemini_model,
            timeout_seconds=cfg.timeout_seconds,
        ),
        AIProvider.GROK: GrokClient(
            api_key=cfg.grok_api_key,
            model=cfg.grok_model,
            base_url=cfg.grok_base_url,
            timeout_seconds=cfg.timeout_seconds,
        ),
    }
