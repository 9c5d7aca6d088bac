"""
Ollama Provider
===============

Local model served by Ollama. This is the default backend, so profile
details used in enhancement prompts stay on premises.

Version: 0.1.0
"""

import time
from typing import Any

import httpx

from shared.config import settings
from shared.llm.provider import LLMMessage, LLMProvider, LLMResponse, LLMUsage
from shared.logging import get_logger


logger = get_logger(__name__)


class OllamaProvider(LLMProvider):
    """Client for Ollama's non-streaming `/api/chat` endpoint."""

    def __init__(
        self,
        host: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            host: Ollama server URL (default from settings)
            model: Model tag (default from settings)
            timeout: Request timeout in seconds (default: enhancement timeout)
            transport: Optional httpx transport, e.g. a MockTransport in tests
        """
        self._model = model or settings.llm.ollama.model
        self._client = httpx.AsyncClient(
            base_url=host or settings.llm.ollama.host,
            timeout=httpx.Timeout(timeout or settings.enhancement.timeout_seconds),
            transport=transport,
        )

        logger.debug("ollama_provider_initialized", host=str(self._client.base_url), model=self._model)

    @property
    def name(self) -> str:
        return "ollama"

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
            httpx.HTTPError: On transport failures or non-2xx responses
        """
        payload = {
            "model": self._model,
            "messages": [m.to_dict() for m in messages],
            "stream": False,
            "options": {
                "temperature": self._default_temperature(temperature),
                "num_predict": max_tokens or settings.llm.max_tokens,
                "num_ctx": settings.llm.ollama.context_window,
            },
        }

        started = time.perf_counter()
        try:
            response = await self._client.post("/api/chat", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("ollama_request_failed", error=str(e), error_type=type(e).__name__)
            raise
        latency_ms = (time.perf_counter() - started) * 1000

        data = response.json()
        usage = LLMUsage.of(data.get("prompt_eval_count", 0), data.get("eval_count", 0))

        logger.debug("ollama_completion", model=self._model, tokens=usage.total_tokens, latency_ms=round(latency_ms, 2))

        return LLMResponse(
            content=data.get("message", {}).get("content", ""),
            model=data.get("model", self._model),
            provider=self.name,
            usage=usage,
            finish_reason=data.get("done_reason"),
            latency_ms=latency_ms,
        )

    async def health_check(self) -> dict[str, Any]:
        """Healthy when the server answers and the configured model is pulled."""
        try:
            response = await self._client.get("/api/tags")
            response.raise_for_status()
        except httpx.ConnectError:
            logger.warning("ollama_not_running")
            return self._health("unhealthy", error="Ollama server not running")
        except httpx.HTTPError as e:
            logger.warning("ollama_health_check_failed", error=str(e))
            return self._health("unhealthy", error=str(e))

        pulled = [m["name"] for m in response.json().get("models", [])]
        available = any(self._model in tag for tag in pulled)

        return self._health("healthy" if available else "degraded", model_available=available)

    async def close(self) -> None:
        await self._client.aclose()
