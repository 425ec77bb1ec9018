from enum import Enum
from typing import Protocol

import httpx

from .exceptions import ApiKeyRequiredError, ConfigurationError, TokenRequiredError
from .log_config import logger


class AuthMethod(Enum):
    """The credential kind a route requires.

    Read-only endpoints take the API key as a query parameter; endpoints that
    act on behalf of a user take an OAuth2 access token.
    """

    API_KEY = "api_key"
    TOKEN = "token"


class AuthStrategy(Protocol):
    """Protocol defining the interface for the authentication strategies.

    Concrete implementations of this protocol add authentication information
    (a query parameter or a header) to an HTTP request.
    """

    method: AuthMethod

    async def async_authenticate(self, request: httpx.Request) -> None:
        """
        Asynchronously modifies the request to add authentication information.

        Args:
            request: The httpx.Request object to modify.
        """
        ...

    async def async_close(self) -> None:
        """
        Asynchronously closes any underlying resources used by the auth strategy.
        This method should be idempotent.
        """
        ...


class ApiKeyAuth:
    """Implements AuthStrategy by appending the `api_key` query parameter.

    Attributes:
        _api_key: The mod.io API key.
    """

    method = AuthMethod.API_KEY

    def __init__(self, api_key: str | None):
        if not api_key:
            raise ConfigurationError("ApiKeyAuth requires a non-empty 'api_key'.")
        self._api_key: str = api_key
        logger.debug("ApiKeyAuth initialized.")

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Adds `api_key=<key>` to the query string of the request."""
        logger.trace("Authenticating request using ApiKeyAuth.")
        request.url = request.url.copy_set_param("api_key", self._api_key)

    async def async_close(self) -> None:
        """No resources to close for ApiKeyAuth, this method is a no-op."""


class StaticTokenAuth:
    """Implements AuthStrategy using an OAuth2 access token.

    The token is added to the `Authorization` header as a Bearer token. A
    token given with a leading `Bearer ` is accepted as well.

    Attributes:
        _token: The access token, without the `Bearer ` prefix.
    """

    method = AuthMethod.TOKEN

    def __init__(self, token: str | None):
        if not token:
            raise ConfigurationError("StaticTokenAuth requires a non-empty 'token'.")
        self._token: str = token.removeprefix("Bearer ")
        logger.debug("StaticTokenAuth initialized.")

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Adds the 'Authorization: Bearer <token>' header to the request."""
        logger.trace("Authenticating request using StaticTokenAuth.")
        request.headers["Authorization"] = f"Bearer {self._token}"

    async def async_close(self) -> None:
        """No resources to close for StaticTokenAuth, this method is a no-op."""


class Credentials:
    """The credentials of a client, selected per route by its `AuthMethod`.

    Attributes:
        api_key: Strategy for API-key routes, if an API key was given.
        token: Strategy for token routes, if a token was given.
    """

    def __init__(self, api_key: str | None = None, token: str | None = None):
        self.api_key: ApiKeyAuth | None = ApiKeyAuth(api_key) if api_key else None
        self.token: StaticTokenAuth | None = StaticTokenAuth(token) if token else None

    def for_method(self, method: AuthMethod) -> AuthStrategy:
        """Selects the strategy for a route.

        Raises:
            ApiKeyRequiredError: If the route needs an API key and none was given.
            TokenRequiredError: If the route needs a token and none was given.
        """
        if method is AuthMethod.TOKEN:
            if self.token is None:
                raise TokenRequiredError(
                    "This endpoint requires an OAuth2 access token."
                )
            return self.token
        if self.api_key is None:
            raise ApiKeyRequiredError("This endpoint requires an API key.")
        return self.api_key

    def with_token(self, token: str) -> "Credentials":
        creds = Credentials()
        creds.api_key = self.api_key
        creds.token = StaticTokenAuth(token)
        return creds

    async def async_close(self) -> None:
        for strategy in (self.api_key, self.token):
            if strategy is not None:
                await strategy.async_close()
