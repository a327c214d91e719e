"""Base schema configuration for all Pydantic models.

- APIRequest: incoming request bodies (extra fields ignored)
- APIResponse: outgoing response bodies (extra fields forbidden)
- DownstreamResponse: payloads from external services, including the
  generation service's untrusted JSON (extra fields ignored)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas."""

    model_config = ConfigDict(
        extra="ignore",
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas."""

    model_config = ConfigDict(
        extra="forbid",
    )


class DownstreamResponse(_BaseSchema):
    """Base class for responses received from external services."""

    model_config = ConfigDict(
        extra="ignore",
    )
