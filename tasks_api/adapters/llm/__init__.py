"""AI adapter layer - abstracts over multiple text-generation providers."""

from tasks_api.adapters.llm.base import AbstractAIClient, AIProvider, GenerationOutcome
from tasks_api.adapters.llm.dispatch import AIDispatcher
from tasks_api.adapters.llm.factory import create_ai_clients, parse_provider
from tasks_api.adapters.llm.gemini_client import GeminiClient
from tasks_api.adapters.llm.grok_client import GrokClient
from tasks_api.adapters.llm.openai_client import ClaudeClient, OpenAIClient
from tasks_api.adapters.llm.prompts import PROMPT_VERSION, build_prompt

__all__ = [
    "AIDispatcher",
    "AIProvider",
    "AbstractAIClient",
    "ClaudeClient",
    "GeminiClient",
    "GenerationOutcome",
    "GrokClient",
    "OpenAIClient",
    "PROMPT_VERSION",
    "build_prompt",
    "create_ai_clients",
    "parse_provider",
]
