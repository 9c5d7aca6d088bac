"""
Compliance Classifier Shared Library
====================================

Common utilities, configuration, and abstractions used by the classification service.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - llm: LLM provider abstraction (Claude, Ollama)
    - models: Shared Pydantic models

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Compliance Classifier Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
