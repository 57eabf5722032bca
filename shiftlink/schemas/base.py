"""Shared schema base: camelCase JSON, snake_case attributes."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Plain acknowledgement."""

    success: bool = True


class FlagRequest(CamelModel):
    """Moderation flag with a reason."""

    reason: str = Field(..., min_length=1, max_length=2000)
