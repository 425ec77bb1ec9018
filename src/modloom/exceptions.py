"""Custom exception classes for the modloom library.

Every request produces either a decoded value or exactly one of the
exceptions below. Local errors are raised before any network I/O.
"""

from datetime import timedelta

import httpx


class ModioError(Exception):
    """Base exception class for all modloom errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        if self.response is not None:
            url_info = getattr(getattr(self.response, "_request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


# --- Local / builder errors ---


class BuilderError(ModioError):
    """Raised while building a request, before anything is sent."""


class ConfigurationError(BuilderError):
    """Represents an error in the library's configuration."""

    def __init__(self, message: str):
        super().__init__(message, response=None)


class InvalidHeaderError(BuilderError):
    """A header name or value cannot be represented on the wire."""


class FormConsumedError(BuilderError):
    """A multipart form was streamed more than once."""


class AuthMethodMismatchError(BuilderError):
    """The route requires a credential kind the client was not given."""


class TokenRequiredError(AuthMethodMismatchError):
    """The route requires an OAuth2 bearer token."""


class ApiKeyRequiredError(AuthMethodMismatchError):
    """The route requires an API key."""


# --- Transport errors ---


class TransportError(ModioError):
    """Represents an error during the HTTP exchange itself.

    Raised for failures reported by the transport that are not covered by
    `TimeoutError` or `NetworkError`, e.g. too many redirects.
    """


class TimeoutError(TransportError):
    """Represents a request timeout error."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class NetworkError(TransportError):
    """Represents a network connection error (DNS failure, connection refused, TLS)."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class BodyStreamError(ModioError):
    """A request body source failed while it was being streamed."""


# --- Response errors ---


class DecodeError(ModioError):
    """The response body could not be decoded into the expected type."""


class RateLimitError(ModioError):
    """The API asked the caller to wait before sending more requests.

    Attributes:
        retry_after: How long to wait before resubmitting.
    """

    def __init__(
        self,
        message: str,
        retry_after: timedelta,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message, response=response, request=request)
        self.retry_after = retry_after


class APIError(ModioError):
    """Represents a structured error returned by the mod.io API.

    Attributes:
        status: The HTTP status code of the response.
        code: The `code` field of the error envelope.
        error_ref: The machine readable `error_ref` of the error envelope.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        code: int | None = None,
        error_ref: int | None = None,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message, response=response, request=request)
        self.status = status
        self.code = code
        self.error_ref = error_ref


class NotFoundError(APIError):
    """Represents a resource not found error (404 Not Found)."""


class UnauthorizedError(APIError):
    """The credentials were rejected (401 Unauthorized)."""


class TermsAcceptanceRequiredError(APIError):
    """The user has to accept the mod.io terms before continuing."""


class ValidationError(APIError):
    """The request failed validation (422 Unprocessable Entity).

    Attributes:
        field_errors: Mapping of field name to error message.
    """

    def __init__(
        self,
        message: str,
        *,
        field_errors: dict[str, str] | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field_errors: dict[str, str] = field_errors or {}


# --- Download errors ---


class DownloadError(ModioError):
    """Base class for errors raised while resolving a download."""

    def __init__(self, message: str, *, game_id: int, mod_id: int):
        super().__init__(message)
        self.game_id = game_id
        self.mod_id = mod_id


class ModNotFoundError(DownloadError):
    def __init__(self, *, game_id: int, mod_id: int):
        super().__init__(
            f"Mod {{id: {mod_id}, game_id: {game_id}}} not found.",
            game_id=game_id,
            mod_id=mod_id,
        )


class NoPrimaryFileError(DownloadError):
    def __init__(self, *, game_id: int, mod_id: int):
        super().__init__(
            f"Mod {{id: {mod_id}, game_id: {game_id}}} Mod has no primary file.",
            game_id=game_id,
            mod_id=mod_id,
        )


class ModFileNotFoundError(DownloadError):
    def __init__(self, *, game_id: int, mod_id: int, file_id: int):
        super().__init__(
            f"Mod {{id: {mod_id}, game_id: {game_id}}}: File {{ id: {file_id} }} not found.",
            game_id=game_id,
            mod_id=mod_id,
        )
        self.file_id = file_id


class VersionNotFoundError(DownloadError):
    def __init__(self, *, game_id: int, mod_id: int, version: str):
        super().__init__(
            f"Mod {{id: {mod_id}, game_id: {game_id}}}: No file with version '{version}' found.",
            game_id=game_id,
            mod_id=mod_id,
        )
        self.version = version


class MultipleFilesFoundError(DownloadError):
    def __init__(self, *, game_id: int, mod_id: int, version: str):
        super().__init__(
            f"Mod {{id: {mod_id}, game_id: {game_id}}}: Multiple files found for version '{version}'.",
            game_id=game_id,
            mod_id=mod_id,
        )
        self.version = version


# --- Upload errors ---


class UploadNotStartedError(BuilderError):
    """A multipart upload session operation was used before the session exists."""
