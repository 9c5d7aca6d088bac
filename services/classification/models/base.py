"""
Profile Base Model
==================

Common configuration for classification profiles.

Profiles are immutable once constructed and accept both camelCase
(wire format) and snake_case field names.

Version: 0.1.0
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProfileModel(BaseModel):
    """Base class for all domain profiles."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CamelModel(BaseModel):
    """Base class for camelCase API responses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
