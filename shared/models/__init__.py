"""
Shared Models
=============

Pydantic models shared across services.

Models:
- ErrorResponse: error envelope used by exception handlers
- ValidationIssue: one field-level validation problem
- HealthResponse: health check payload
"""

from shared.models.common import (
    ErrorResponse,
    HealthResponse,
    ValidationIssue,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ValidationIssue",
]
