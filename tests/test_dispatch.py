"""Tests for provider resolution, client construction and dispatch."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tasks_api.adapters.llm import (
    AIDispatcher,
    AIProvider,
    ClaudeClient,
    GeminiClient,
    GenerationOutcome,
    GrokClient,
    OpenAIClient,
    build_prompt,
    create_ai_clients,
    parse_provider,
)
from tasks_api.core.config import AISettings
from tasks_api.core.errors import ValidationAppError


def _fake_client(provider: AIProvider, outcome: GenerationOutcome) -> MagicMock:
    client = MagicMock()
    client.provider = provider
    client.model = f"{provider.value}-model"
    client.generate = AsyncMock(return_value=outcome)
    return client


class TestParseProvider:
    @pytest.mark.parametrize("name", ["openai", "OpenAI", " grok "])
    def test_case_and_whitespace_insensitive(self, name: str) -> None:
        assert parse_provider(name).value == name.strip().lower()

    def test_enum_passthrough(self) -> None:
        assert parse_provider(AIProvider.GEMINI) is AIProvider.GEMINI

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            parse_provider("mistral")

        assert exc_info.value.code == "llm_unknown_provider"
        assert "openai, claude, gemini, grok" in exc_info.value.message


class TestCreateAIClients:
    def test_one_adapter_per_provider(self) -> None:
        clients = create_ai_clients(AISettings())

        assert set(clients) == set(AIProvider)
        assert isinstance(clients[AIProvider.OPENAI], OpenAIClient)
        assert isinstance(clients[AIProvider.CLAUDE], ClaudeClient)
        assert isinstance(clients[AIProvider.GEMINI], GeminiClient)
        assert isinstance(clients[AIProvider.GROK], GrokClient)

    def test_missing_keys_leave_adapters_unconfigured(self) -> None:
        clients = create_ai_clients(AISettings())

        assert not any(client.is_configured for client in clients.values())

    def test_settings_flow_into_adapters(self) -> None:
        cfg = AISettings(
            openai_api_key="sk-test",
            openai_model="gpt-4o-mini",
            grok_api_key="xai-test",
            timeout_seconds=5,
        )

        clients = create_ai_clients(cfg)

        openai_client = clients[AIProvider.OPENAI]
        assert openai_client.is_configured
        assert openai_client.model == "gpt-4o-mini"
        assert openai_client.timeout_seconds == 5
        assert clients[AIProvider.GROK].api_url == "https://api.x.ai/v1/chat/completions"
        assert not clients[AIProvider.CLAUDE].is_configured


class TestAIDispatcher:
    @pytest.mark.asyncio
    async def test_generate_normalizes_prompt(self) -> None:
        openai_client = _fake_client(AIProvider.OPENAI, GenerationOutcome.ok("done"))
        dispatcher = AIDispatcher({AIProvider.OPENAI: openai_client})

        outcome = await dispatcher.generate(
            "openai", "Plan a sprint", metadata={"tone": "concise"}
        )

        assert outcome == GenerationOutcome(success=True, data="done")
        openai_client.generate.assert_awaited_once_with(
            build_prompt("Plan a sprint", None, {"tone": "concise"})
        )

    @pytest.mark.asyncio
    async def test_complete_sends_prompt_unchanged(self) -> None:
        gemini = _fake_client(AIProvider.GEMINI, GenerationOutcome.ok("better"))
        dispatcher = AIDispatcher({AIProvider.GEMINI: gemini})

        await dispatcher.complete(AIProvider.GEMINI, "raw prompt")

        gemini.generate.assert_awaited_once_with("raw prompt")

    @pytest.mark.asyncio
    async def test_routes_to_selected_provider_only(self) -> None:
        openai_client = _fake_client(AIProvider.OPENAI, GenerationOutcome.ok("a"))
        claude = _fake_client(AIProvider.CLAUDE, GenerationOutcome.ok("b"))
        dispatcher = AIDispatcher({AIProvider.OPENAI: openai_client, AIProvider.CLAUDE: claude})

        outcome = await dispatcher.generate("claude", "x")

        assert outcome.data == "b"
        openai_client.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_provider_is_failed_outcome(self) -> None:
        dispatcher = AIDispatcher({})

        outcome = await dispatcher.generate("mistral", "x")

        assert outcome.success is False
        assert "Unknown AI provider: 'mistral'" in outcome.error

    @pytest.mark.asyncio
    async def test_unregistered_provider_is_failed_outcome(self) -> None:
        dispatcher = AIDispatcher(
            {AIProvider.OPENAI: _fake_client(AIProvider.OPENAI, GenerationOutcome.ok("a"))}
        )

        outcome = await dispatcher.complete("grok", "x")

        assert outcome == GenerationOutcome(
            success=False, error="AI provider 'grok' is not available"
        )

    @pytest.mark.asyncio
    async def test_failure_outcome_passed_through(self) -> None:
        failing = _fake_client(AIProvider.OPENAI, GenerationOutcome.fail("quota exceeded"))
        dispatcher = AIDispatcher({AIProvider.OPENAI: failing})

        outcome = await dispatcher.generate("openai", "x")

        assert outcome == GenerationOutcome(success=False, error="quota exceeded")

    @pytest.mark.asyncio
    async def test_unconfigured_provider_from_settings(self) -> None:
        dispatcher = AIDispatcher(create_ai_clients(AISettings()))

        outcome = await dispatcher.generate("claude", "write a task about budgeting")

        assert outcome == GenerationOutcome(success=False, error="Claude API key not configured")

    @pytest.mark.asyncio
    async def test_unrenderable_context_is_failed_outcome(self) -> None:
        openai_client = _fake_client(AIProvider.OPENAI, GenerationOutcome.ok("unused"))
        dispatcher = AIDispatcher({AIProvider.OPENAI: openai_client})
        circular: dict = {}
        circular["self"] = circular

        outcome = await dispatcher.generate("openai", "x", metadata={"loop": circular})

        assert outcome.success is False
        assert outcome.error.startswith("Could not render prompt:")
        openai_client.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mixed_key_metadata_still_dispatched(self) -> None:
        openai_client = _fake_client(AIProvider.OPENAI, GenerationOutcome.ok("done"))
        dispatcher = AIDispatcher({AIProvider.OPENAI: openai_client})

        outcome = await dispatcher.generate("openai", "x", metadata={"qa": {1: "a", "b": "c"}})

        assert outcome.data == "done"

    def test_client_for_unregistered(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            AIDispatcher({}).client_for("openai")

        assert exc_info.value.code == "llm_provider_unavailable"
        assert exc_info.value.details == {"provider": "openai"}

    def test_providers_listed_in_registration_order(self) -> None:
        dispatcher = AIDispatcher(create_ai_clients(AISettings()))

        assert dispatcher.providers == [
            AIProvider.OPENAI,
            AIProvider.CLAUDE,
            AIProvider.GEMINI,
            AIProvider.GROK,
        ]
