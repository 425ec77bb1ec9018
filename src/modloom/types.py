# modloom/types.py
"""Core type definitions and data structures for modloom.

This module defines the request data model handed from the request pipeline
to the transport, and type aliases for request hooks.
"""

from collections.abc import Callable, Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .constants import FORM_URLENCODED
from .multipart import Form


class RequestData(BaseModel):
    """Encapsulates data for a single HTTP request.

    At most one body kind is set: `data` (url-encoded form), `multipart`
    (streamed multipart/form-data) or `content` (raw bytes or an async byte
    iterator). Bodiless and url-encoded requests get the url-encoded form
    `Content-Type` unless one is given; raw content is sent as is.
    """

    method: str
    url: str
    params: dict[str, Any] | None = None
    data: Mapping[str, Any] | None = None
    multipart: Form | None = None
    content: Any | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    def build_request(self) -> httpx.Request:
        """Builds an httpx.Request object from the stored data.

        A multipart body is consumed here, so this is called once per request.
        """
        headers = httpx.Headers(self.headers)
        content = self.content
        if self.multipart is not None:
            headers["Content-Type"] = self.multipart.content_type()
            length = self.multipart.compute_length()
            if length is not None:
                headers["Content-Length"] = str(length)
            content = self.multipart.stream()
        elif content is None and "Content-Type" not in headers:
            headers["Content-Type"] = FORM_URLENCODED

        return httpx.Request(
            method=self.method,
            url=self.url,
            params=self.params,
            data=self.data,
            content=content,
            headers=headers,
        )


PreRequestHook = Callable[[str, str, dict[str, Any] | None, httpx.Headers], None]
"""Type alias for a pre-request hook.

Pre-request hooks are functions called before an HTTP request is sent.
They can be used to modify query parameters, headers, or perform other
actions like logging.

Args:
    method (str): The HTTP method of the request (e.g., "GET", "POST").
    url (str): The full URL of the request.
    params (dict[str, Any] | None): A mutable dictionary of query parameters.
        Hooks can modify this dictionary in place.
    headers (httpx.Headers): A mutable `httpx.Headers` object. Hooks can
        modify this object in place.
Return:
    None: Hooks are expected to modify arguments in-place or perform side effects.
"""

PostRequestHook = Callable[[httpx.Response, Any], None]
"""Type alias for a post-request hook.

Post-request hooks are functions called after an HTTP response is received
and classified successfully.

Args:
    response (httpx.Response): The raw `httpx.Response` object.
    parsed (Any): The decoded response value, or `None` for empty bodies.
Return:
    None: Hooks are expected to perform side effects.
"""
