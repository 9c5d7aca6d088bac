"""
LLM Provider Base
=================

Common interface for the language models that may enrich a
classification report with additional recommendations.

Enhancement is optional and best-effort: a provider call is a single
attempt, and callers own the timeout and the fallback.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, Field

from shared.config import settings, LLMProvider as LLMProviderEnum
from shared.logging import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]


class LLMMessage(BaseModel):
    """A single chat message."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class LLMUsage(BaseModel):
    """Token accounting for one completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def of(cls, prompt_tokens: int, completion_tokens: int) -> "LLMUsage":
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )


class LLMResponse(BaseModel):
    """Completion returned by a provider."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model that produced the text")
    provider: str
    usage: LLMUsage = Field(default_factory=LLMUsage)
    finish_reason: str | None = None
    latency_ms: float = 0.0


class LLMProvider(ABC):
    """
    Base class for LLM backends.

    Subclasses implement `complete` and `health_check`; everything the
    enhancement layer needs is built on those two calls.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate a completion for the given messages.

        Args:
            messages: Conversation messages
            temperature: Sampling temperature (default from settings)
            max_tokens: Maximum tokens to generate (default from settings)

        Returns:
            LLMResponse with generated content
        """
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Report provider reachability as a health component."""
        ...

    async def generate_text(
        self,
        prompt: str,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> str:
        """
        Complete a single user prompt, optionally with a system prompt.

        Args:
            prompt: User prompt
            system_prompt: Optional system instructions
            **kwargs: Passed through to complete()

        Returns:
            Generated text
        """
        messages = [LLMMessage(role="user", content=prompt)]
        if system_prompt:
            messages.insert(0, LLMMessage(role="system", content=system_prompt))

        response = await self.complete(messages, **kwargs)
        return response.content

    async def close(self) -> None:
        """Release client resources. No-op by default."""
        return None

    def _health(self, status: str, **details: Any) -> dict[str, Any]:
        return {"status": status, "provider": self.name, "model": self.model, **details}

    @staticmethod
    def _default_temperature(temperature: float | None) -> float:
        return settings.llm.temperature if temperature is None else temperature


def _build_claude() -> LLMProvider:
    from shared.llm.claude import ClaudeProvider

    return ClaudeProvider()


def _build_ollama() -> LLMProvider:
    from shared.llm.ollama import OllamaProvider

    return OllamaProvider()


_FACTORIES: dict[LLMProviderEnum, Callable[[], LLMProvider]] = {
    LLMProviderEnum.CLAUDE: _build_claude,
    LLMProviderEnum.OLLAMA: _build_ollama,
}

_provider: LLMProvider | None = None


def get_llm_provider() -> LLMProvider:
    """
    Get the provider selected by `settings.llm.provider`.

    The instance is created on first use and cached.
    """
    global _provider

    if _provider is None:
        _provider = _FACTORIES[settings.llm.provider]()
        logger.info(
            "llm_provider_initialized",
            provider=_provider.name,
            model=_provider.model,
        )

    return _provider


def set_llm_provider(provider: LLMProvider) -> None:
    """Install a specific provider instance (tests, custom backends)."""
    global _provider
    _provider = provider
    logger.info("llm_provider_set", provider=provider.name, model=provider.model)


def reset_llm_provider() -> None:
    """Forget the cached provider without closing it."""
    global _provider
    _provider = None


async def close_llm_provider() -> None:
    """Close and forget the cached provider, if one was created."""
    global _provider

    if _provider is not None:
        await _provider.close()
        logger.info("llm_provider_closed", provider=_provider.name)
        _provider = None
