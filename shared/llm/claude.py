"""
Claude Provider
===============

Anthropic Messages API backend for report enhancement.

Version: 0.1.0
"""

import time
from typing import Any

import anthropic

from shared.config import settings
from shared.llm.provider import LLMMessage, LLMProvider, LLMResponse, LLMUsage
from shared.logging import get_logger

logger = get_logger(__name__)


class ClaudeProvider(LLMProvider):
    """
    Anthropic Claude backend.

    SDK retries are disabled: one completion is exactly one request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        """
        Args:
            api_key: Anthropic API key (default from settings)
            model: Model name (default from settings)
            client: Pre-built client; skips key lookup

        Raises:
            ValueError: If neither a client nor an API key is available
        """
        self._model = model or settings.llm.claude.model

        if client is None:
            api_key = api_key or settings.llm.claude.api_key.get_secret_value()
            if not api_key:
                raise ValueError("Anthropic API key not configured")
            client = anthropic.AsyncAnthropic(
                api_key=api_key,
                max_retries=0,
                timeout=settings.enhancement.timeout_seconds,
            )

        self._client = client

        logger.debug("claude_provider_initialized", model=self._model)

    @property
    def name(self) -> str:
        return "claude"

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Raises:
            anthropic.APIError: On any API failure
        """
        # The Messages API takes the system prompt as a separate parameter
        system = [m.content for m in messages if m.role == "system"]
        request: dict[str, Any] = {
            "model": self._model,
            "messages": [m.to_dict() for m in messages if m.role != "system"],
            "max_tokens": max_tokens or settings.llm.max_tokens,
            "temperature": self._default_temperature(temperature),
        }
        if system:
            request["system"] = "\n\n".join(system)

        started = time.perf_counter()
        try:
            response = await self._client.messages.create(**request)
        except anthropic.APIError as e:
            logger.warning("claude_request_failed", error=str(e), error_type=type(e).__name__)
            raise
        latency_ms = (time.perf_counter() - started) * 1000

        usage = LLMUsage.of(response.usage.input_tokens, response.usage.output_tokens)

        logger.debug("claude_completion", model=self._model, tokens=usage.total_tokens, latency_ms=round(latency_ms, 2))

        return LLMResponse(
            content="".join(getattr(block, "text", "") for block in response.content),
            model=response.model,
            provider=self.name,
            usage=usage,
            finish_reason=response.stop_reason,
            latency_ms=latency_ms,
        )

    async def health_check(self) -> dict[str, Any]:
        """Healthy when the configured model can be retrieved."""
        try:
            await self._client.models.retrieve(self._model)
        except anthropic.APIError as e:
            logger.warning("claude_health_check_failed", error=str(e))
            return self._health("unhealthy", error=str(e))

        return self._health("healthy")

    async def close(self) -> None:
        await self._client.close()
