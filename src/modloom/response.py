"""Classification of completed HTTP responses.

Every response handled by the request pipeline ends up here. A 2xx response
is decoded into the expected type; anything else becomes exactly one
exception from `modloom.exceptions`.
"""

from datetime import UTC, datetime as dt, timedelta
from email.utils import parsedate_to_datetime
from http import HTTPStatus
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .constants import TERMS_ACCEPTANCE_REQUIRED_ERROR_REF
from .exceptions import (
    APIError,
    DecodeError,
    NotFoundError,
    RateLimitError,
    TermsAcceptanceRequiredError,
    UnauthorizedError,
    ValidationError,
)
from .log_config import logger
from .models.base import ErrorResponse

T = TypeVar("T")


def parse_retry_after(response: httpx.Response) -> timedelta | None:
    """Parses the `Retry-After` header of a response.

    Both forms allowed by RFC 9110 are accepted: a number of seconds and an
    HTTP-date, which is converted to the remaining time from now.

    Args:
        response: The HTTP response to inspect.

    Returns:
        timedelta | None: The wait duration, or None if the header is absent
            or cannot be parsed.
    """
    header = response.headers.get("Retry-After")
    if not header:
        return None
    header = header.strip()
    if header.isascii() and header.isdigit():
        logger.debug(f"Parsed Retry-After (seconds): {header}")
        return timedelta(seconds=int(header))
    try:
        retry_dt_obj = parsedate_to_datetime(header)
    except (TypeError, ValueError) as e:
        logger.warning(f"Could not parse Retry-After header '{header}': {e}")
        return None
    if retry_dt_obj.tzinfo is None:
        retry_dt_obj = retry_dt_obj.replace(tzinfo=UTC)
    delta = retry_dt_obj - dt.now(UTC)
    logger.debug(f"Parsed Retry-After (HTTP date): {header}, remaining: {delta}")
    return max(delta, timedelta(0))


def decode_body(response: httpx.Response, model: Any) -> Any:
    """Decodes a JSON body into `model` (a pydantic model class or any type).

    Raises:
        DecodeError: If the body is not valid JSON for the model.
    """
    try:
        if isinstance(model, type) and issubclass(model, BaseModel):
            return model.model_validate_json(response.content)
        return TypeAdapter(model).validate_json(response.content)
    except PydanticValidationError as e:
        logger.error(f"Failed to decode response body as {model}: {e}")
        raise DecodeError(
            f"Failed to decode response body: {e}", response=response
        ) from e


def classify_response(response: httpx.Response, model: type[T] | Any | None) -> T | None:
    """Turns a completed response into a decoded value or a typed error.

    Args:
        response: The completed HTTP response. Its body must already be read.
        model: The expected success type, or None when no body is expected.

    Returns:
        The decoded success value, or None for bodiless successes.

    Raises:
        DecodeError: If a body does not decode (success body or error envelope).
        RateLimitError: If a non-2xx response carries a `Retry-After` header.
        ValidationError: For 422 responses.
        UnauthorizedError: For 401 responses.
        TermsAcceptanceRequiredError: For 403 responses asking to accept the terms.
        NotFoundError: For 404 responses.
        APIError: For every other error response.
    """
    status = response.status_code
    if HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
        if model is None or status == HTTPStatus.NO_CONTENT:
            return None
        return decode_body(response, model)

    retry_after = parse_retry_after(response)
    if retry_after is not None:
        logger.warning(f"Rate limited with status {status}, retry after {retry_after}")
        raise RateLimitError(
            f"Rate limit exceeded, retry after {int(retry_after.total_seconds())}s",
            retry_after,
            response=response,
        )

    envelope = decode_body(response, ErrorResponse)
    error = envelope.error
    logger.debug(
        f"API error {status} (code={error.code}, error_ref={error.error_ref}): {error.message}"
    )
    kwargs = {
        "status": status,
        "code": error.code,
        "error_ref": error.error_ref,
        "response": response,
    }
    if status == HTTPStatus.UNPROCESSABLE_ENTITY:
        raise ValidationError(error.message, field_errors=error.errors, **kwargs)
    if status == HTTPStatus.UNAUTHORIZED:
        raise UnauthorizedError(error.message, **kwargs)
    if (
        status == HTTPStatus.FORBIDDEN
        and error.error_ref == TERMS_ACCEPTANCE_REQUIRED_ERROR_REF
    ):
        raise TermsAcceptanceRequiredError(error.message, **kwargs)
    if status == HTTPStatus.NOT_FOUND:
        raise NotFoundError(error.message, **kwargs)
    raise APIError(error.message, **kwargs)
