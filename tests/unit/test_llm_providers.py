"""
LLM Provider Tests
==================

Tests for the Ollama and Claude providers without network access.

Version: 0.1.0
"""

import json
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest
from pydantic import SecretStr

from shared.config import settings
from shared.llm import (
    ClaudeProvider,
    LLMMessage,
    OllamaProvider,
    close_llm_provider,
    get_llm_provider,
    reset_llm_provider,
    set_llm_provider,
)


# =============================================================================
# Ollama
# =============================================================================


def ollama_transport(requests: list[httpx.Request], chat_status: int = 200) -> httpx.MockTransport:
    """Mock Ollama server recording incoming requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": "llama2:7b"}]})
        if request.url.path == "/api/chat":
            if chat_status != 200:
                return httpx.Response(chat_status, json={"error": "model not loaded"})
            return httpx.Response(
                200,
                json={
                    "model": "llama2:7b",
                    "message": {"role": "assistant", "content": "- Encrypt all backups at rest"},
                    "prompt_eval_count": 12,
                    "eval_count": 8,
                    "done_reason": "stop",
                },
            )
        return httpx.Response(404)

    return httpx.MockTransport(handler)


class TestOllamaProvider:
    """Tests for the Ollama provider."""

    @pytest.mark.asyncio
    async def test_complete(self) -> None:
        requests: list[httpx.Request] = []
        provider = OllamaProvider(host="http://ollama.test", transport=ollama_transport(requests))

        response = await provider.complete(
            [LLMMessage(role="user", content="Suggest measures")],
            temperature=0.2,
        )

        assert response.content == "- Encrypt all backups at rest"
        assert response.provider == "ollama"
        assert response.usage.total_tokens == 20
        assert response.finish_reason == "stop"

        body = json.loads(requests[0].content)
        assert body["stream"] is False
        assert body["options"]["temperature"] == 0.2
        assert body["messages"] == [{"role": "user", "content": "Suggest measures"}]

        await provider.close()

    @pytest.mark.asyncio
    async def test_generate_text_with_system_prompt(self) -> None:
        requests: list[httpx.Request] = []
        provider = OllamaProvider(host="http://ollama.test", transport=ollama_transport(requests))

        text = await provider.generate_text("Suggest measures", system_prompt="You are an expert")

        assert text == "- Encrypt all backups at rest"
        roles = [m["role"] for m in json.loads(requests[0].content)["messages"]]
        assert roles == ["system", "user"]

        await provider.close()

    @pytest.mark.asyncio
    async def test_single_attempt_on_error(self) -> None:
        requests: list[httpx.Request] = []
        provider = OllamaProvider(
            host="http://ollama.test",
            transport=ollama_transport(requests, chat_status=500),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await provider.generate_text("Suggest measures")

        assert len(requests) == 1

        await provider.close()

    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        provider = OllamaProvider(
            host="http://ollama.test",
            model="llama2:7b",
            transport=ollama_transport([]),
        )

        health = await provider.health_check()

        assert health["status"] == "healthy"
        assert health["model_available"] is True

        await provider.close()

    @pytest.mark.asyncio
    async def test_health_check_missing_model(self) -> None:
        provider = OllamaProvider(
            host="http://ollama.test",
            model="mistral",
            transport=ollama_transport([]),
        )

        health = await provider.health_check()

        assert health["status"] == "degraded"

        await provider.close()


# =============================================================================
# Claude
# =============================================================================


def claude_client() -> MagicMock:
    """Fake AsyncAnthropic client."""
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=MagicMock(
            content=[MagicMock(text="- Review the legal basis annually")],
            usage=MagicMock(input_tokens=30, output_tokens=10),
            model="claude-test",
            stop_reason="end_turn",
        )
    )
    client.models.retrieve = AsyncMock()
    client.close = AsyncMock()
    return client


class TestClaudeProvider:
    """Tests for the Claude provider."""

    @pytest.mark.asyncio
    async def test_system_prompt_is_separate(self) -> None:
        client = claude_client()
        provider = ClaudeProvider(model="claude-test", client=client)

        text = await provider.generate_text("Suggest measures", system_prompt="You are an expert")

        assert text == "- Review the legal basis annually"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "You are an expert"
        assert kwargs["messages"] == [{"role": "user", "content": "Suggest measures"}]
        assert kwargs["model"] == "claude-test"

    @pytest.mark.asyncio
    async def test_usage(self) -> None:
        provider = ClaudeProvider(client=claude_client())

        response = await provider.complete([LLMMessage(role="user", content="Hi")])

        assert response.usage.total_tokens == 40
        assert response.finish_reason == "end_turn"

    @pytest.mark.asyncio
    async def test_api_error_propagates(self) -> None:
        client = claude_client()
        client.messages.create.side_effect = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        provider = ClaudeProvider(client=client)

        with pytest.raises(anthropic.APIError):
            await provider.generate_text("Suggest measures")

        assert client.messages.create.await_count == 1

    @pytest.mark.asyncio
    async def test_health_check(self) -> None:
        client = claude_client()
        provider = ClaudeProvider(client=client)

        assert (await provider.health_check())["status"] == "healthy"

        await provider.close()
        client.close.assert_awaited_once()

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setattr(settings.llm.claude, "api_key", SecretStr(""))

        with pytest.raises(ValueError, match="API key"):
            ClaudeProvider(api_key="")

    def test_api_key_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.setattr(settings.llm.claude, "api_key", SecretStr("sk-from-settings"))

        provider = ClaudeProvider(api_key="")

        assert provider.name == "claude"


# =============================================================================
# Provider Registry
# =============================================================================


class TestProviderRegistry:
    """Tests for the cached provider instance."""

    @pytest.mark.asyncio
    async def test_set_and_close(self) -> None:
        client = claude_client()
        provider = ClaudeProvider(client=client)

        set_llm_provider(provider)
        assert get_llm_provider() is provider

        await close_llm_provider()
        client.close.assert_awaited_once()

        reset_llm_provider()

    @pytest.mark.asyncio
    async def test_close_without_provider(self) -> None:
        reset_llm_provider()

        await close_llm_provider()
