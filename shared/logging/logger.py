"""
Logger Implementation
=====================

structlog configuration for the classification service.

- JSON lines in production, colored console with rich tracebacks otherwise
- Every entry carries the service name and an ISO UTC timestamp
- Credentials are redacted before rendering
- Per-request context (request id, path) via contextvars

Version: 0.1.0
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger


REDACTED = "***REDACTED***"

# Substrings of keys whose values never reach the log output
SENSITIVE_KEYS = frozenset({"api_key", "secret", "token", "authorization", "password"})

# Chatty client libraries used by the LLM providers
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "asyncio")


class _ServiceContext:
    """Processor adding the configured service name and version."""

    def __init__(self, service: str, version: str) -> None:
        self.service = service
        self.version = version

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", self.service)
        event_dict.setdefault("version", self.version)
        return event_dict


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if _is_sensitive(key) else _redact(item)
            for key, item in value.items()
        }
    return value


def _is_sensitive(key: Any) -> bool:
    return isinstance(key, str) and any(s in key.lower() for s in SENSITIVE_KEYS)


def _censor_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact credential-like keys, including inside nested dicts."""
    return _redact(event_dict)


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    service_name: str = "compliance-classifier",
    version: str = "0.1.0",
) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: Render JSON lines (production) instead of console output
        service_name: Value of the `service` key on every entry
        version: Value of the `version` key on every entry
    """
    level = logging.getLevelName(log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _ServiceContext(service_name, version),
        _censor_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Processor
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        shared_processors.append(structlog.dev.set_exc_info)
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=10),
        )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str | None = None) -> "BoundLogger":
    """
    Get a structured logger, typically `get_logger(__name__)`.

    Example:
        logger.info("ai_system_classified", tier="high", score=0.5)
    """
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to every log entry of the current async context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all context bound with `bind_context`."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def request_logging_context(**kwargs: Any) -> Iterator[None]:
    """
    Bind context for the duration of one request.

    Starts from a clean context so nothing leaks between requests
    served by the same task.
    """
    clear_context()
    try:
        with structlog.contextvars.bound_contextvars(**kwargs):
            yield
    finally:
        clear_context()
