"""Base Pydantic models for mod.io API responses.

This module defines the envelopes shared by every endpoint: the paginated
list envelope, the error envelope and the plain message acknowledgement.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ItemType = TypeVar("ItemType")


class ModioModel(BaseModel):
    """Base model for mod.io entities.

    Unknown fields are kept rather than rejected, so the models keep working
    when mod.io adds fields to a response.
    """

    model_config = ConfigDict(extra="allow")


def empty_object_as_none(value: Any) -> Any:
    """mod.io sends `{}` instead of null for some missing objects."""
    if isinstance(value, dict) and not value:
        return None
    return value


class ListResponse(BaseModel, Generic[ItemType]):
    """The envelope returned by every paginated endpoint.

    Attributes:
        data: The items of this page.
        count: Number of items in `data` (`result_count`).
        total: Total number of items matching the query (`result_total`).
        limit: The page size applied by the server (`result_limit`).
        offset: The offset applied by the server (`result_offset`).
    """

    data: list[ItemType]
    count: int = Field(alias="result_count")
    total: int = Field(alias="result_total")
    limit: int = Field(alias="result_limit")
    offset: int = Field(alias="result_offset")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ErrorDetail(BaseModel):
    """The `error` object of the error envelope."""

    code: int
    error_ref: int = 0
    message: str
    errors: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")


class ErrorResponse(BaseModel):
    """The error envelope: `{"error": {code, error_ref, message, errors}}`."""

    error: ErrorDetail


class Message(BaseModel):
    """A plain acknowledgement returned by some write endpoints."""

    code: int
    message: str
