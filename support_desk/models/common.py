"""
Common response models and utilities.

Generic response envelopes and the camelCase base model shared by all
API schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """
    Base for API schemas.

    Serializes as camelCase; accepts camelCase or snake_case on input and
    reads ORM rows directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json_dict(self) -> dict:
        """camelCase JSON-safe dict, as sent over HTTP and SSE."""
        return self.model_dump(mode="json", by_alias=True)


class SuccessResponse(BaseModel, Generic[T]):
    """Generic success response wrapper."""

    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")


class AckResponse(BaseModel):
    """Acknowledgement with no payload."""

    success: bool = True
