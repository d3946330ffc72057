# bjjconnect/core/schemas.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Wire format is camelCase; Python attributes stay snake_case.
    Requests accept both spellings.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessEnvelope(CamelModel):
    """Every success response carries ``success: true`` next to its payload."""

    success: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str | None = None
