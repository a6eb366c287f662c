"""Common Pydantic v2 schemas shared across the API.

Provides the camelCase base model and the error response schemas.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose fields travel as camelCase on the wire.

    Python code uses snake_case attribute names; requests may use either
    form, responses always use camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    """One violated field rule."""

    path: list[str | int] = Field(description="Location of the offending field, e.g. ['ward']")
    message: str = Field(description="Human-readable description of the rule violation")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    message: str = Field(description="Human-readable error message")
    errors: list[FieldError] | None = Field(default=None, description="Detailed validation errors")
