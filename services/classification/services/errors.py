"""
Classification Errors
=====================

Exception taxonomy for the classification engine.

- ProfileValidationError: malformed profile, rejected before classification
- UnknownCriterionError / CriterionConfigurationError: engine misconfiguration
- EnhancementUnavailableError: optional enhancement failed, never fatal
- EmptyReportSetError: nothing to aggregate

Version: 0.1.0
"""

from typing import Any


class ClassificationError(Exception):
    """Base class for classification engine errors."""


class ProfileValidationError(ClassificationError):
    """Profile is malformed or incomplete."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class UnknownCriterionError(ClassificationError, KeyError):
    """A criterion key is not part of the domain's criterion set."""

    def __init__(self, key: str, domain: str) -> None:
        super().__init__(f"Unknown criterion '{key}' for domain '{domain}'")
        self.key = key
        self.domain = domain

    def __str__(self) -> str:
        return str(self.args[0])


class CriterionConfigurationError(ClassificationError, ValueError):
    """Criterion, rule or policy tables are inconsistent."""


class UnknownDomainError(ClassificationError):
    """No classifier is registered for the requested domain."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"Unknown classification domain '{domain}'")
        self.domain = domain


class EmptyReportSetError(ClassificationError, ValueError):
    """Aggregation was requested for zero reports."""


class EnhancementUnavailableError(ClassificationError):
    """The recommendation source could not produce additional recommendations."""
