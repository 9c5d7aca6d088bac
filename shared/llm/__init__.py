"""
LLM Provider Module
===================

Abstraction layer for the LLM backends used to enhance classification reports.

Supported providers:
- Ollama (local, default)
- Anthropic Claude

Usage:
    from shared.llm import get_llm_provider

    provider = get_llm_provider()
    text = await provider.generate_text(
        "Suggest additional EU AI Act measures.",
        system_prompt="You are a data protection expert.",
    )
"""

from shared.llm.provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
    LLMUsage,
    close_llm_provider,
    get_llm_provider,
    reset_llm_provider,
    set_llm_provider,
)
from shared.llm.claude import ClaudeProvider
from shared.llm.ollama import OllamaProvider

__all__ = [
    # Base
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "LLMUsage",
    "close_llm_provider",
    "get_llm_provider",
    "reset_llm_provider",
    "set_llm_provider",
    # Providers
    "ClaudeProvider",
    "OllamaProvider",
]
