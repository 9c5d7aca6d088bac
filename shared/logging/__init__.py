"""
Logging Module
==============

Structured logging with structlog: JSON lines in production, colored
console output in development.

Usage:
    from shared.logging import get_logger, setup_logging

    setup_logging(service_name="classification")
    logger = get_logger(__name__)

    logger.info("ai_system_classified", tier="high", score=0.5)
    logger.debug("enhancement_unavailable", error=str(e))
"""

from shared.logging.logger import (
    bind_context,
    clear_context,
    get_logger,
    request_logging_context,
    setup_logging,
)


__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "request_logging_context",
    "setup_logging",
]
