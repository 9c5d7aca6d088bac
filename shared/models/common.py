"""
Common Models
=============

HTTP envelopes shared by the service: the error body returned by every
exception handler and the health payload.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """One field-level validation problem."""

    loc: list[str | int]
    msg: str
    type: str

    @classmethod
    def from_errors(cls, errors: Sequence[Mapping[str, Any]]) -> list["ValidationIssue"]:
        """Reduce pydantic error dicts to JSON-safe issues."""
        return [
            cls(loc=list(e.get("loc", ())), msg=str(e.get("msg", "")), type=str(e.get("type", "")))
            for e in errors
        ]


class ErrorResponse(BaseModel):
    """Body of every non-2xx response: `{success: false, error, status_code}`."""

    success: bool = False
    error: Any
    status_code: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def invalid(cls, message: str, issues: list[ValidationIssue], status_code: int = 422) -> "ErrorResponse":
        return cls(
            error={"message": message, "details": [i.model_dump() for i in issues]},
            status_code=status_code,
        )


class HealthResponse(BaseModel):
    """Service health; degraded as soon as one component is not healthy."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_components(
        cls,
        service: str,
        version: str,
        components: dict[str, dict[str, Any]],
    ) -> "HealthResponse":
        healthy = all(c.get("status") == "healthy" for c in components.values())
        return cls(
            status="healthy" if healthy else "degraded",
            service=service,
            version=version,
            components=components,
        )
