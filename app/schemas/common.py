"""
Common Schemas

Response envelope and the camelCase base model used by API schemas.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model exposing snake_case fields as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class APIResponse(BaseModel, Generic[T]):
    """Envelope wrapping every API response."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


def error_body(message: str) -> dict:
    return {"success": False, "error": message}
