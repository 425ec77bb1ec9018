# modloom/resources/base_client.py
"""Defines the base class for all mod.io resource clients in the modloom library."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..log_config import logger

if TYPE_CHECKING:
    from ..client import ModioClient


def form_value(value: Any) -> str:
    """Renders a scalar the way mod.io form fields expect it."""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def form_fields(values: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Renders options as url-encoded form fields.

    Unset (None) values are dropped. Sequences become repeated `name[]`
    fields, which is how mod.io receives arrays.
    """
    if isinstance(values, BaseModel):
        values = values.model_dump(mode="json", exclude_none=True)
    fields: dict[str, Any] = {}
    for name, value in values.items():
        if value is None:
            continue
        if isinstance(value, Iterable) and not isinstance(value, str | bytes):
            fields[f"{name}[]"] = [form_value(v) for v in value]
        else:
            fields[name] = form_value(value)
    return fields


class BaseResourceClient:
    """
    Base class for all resource clients.

    Resource clients are thin wrappers that pair a route from
    `modloom.routing.Routes` with the expected response model and hand both
    to the request pipeline of the `ModioClient`.
    """

    def __init__(self, api_client: "ModioClient"):
        """
        Initialize the base resource client.

        Args:
            api_client: An instance of ModioClient.
        """
        self._api_client = api_client
        logger.debug(f"{self.__class__.__name__} initialized")
