"""Asynchronous client for the mod.io REST API.

This module provides the ModioClient class, which owns the shared HTTP
transport and runs every API call through one request pipeline: credential
selection, request building, pre-request hooks, sending, error mapping,
response classification and post-request hooks. Paging, downloads and
multipart uploads are built on top of that pipeline.
"""

import copy
import ssl
from collections.abc import Mapping
from typing import Any, Self, TypeVar

import certifi
import httpx

from .auth import Credentials
from .config import ModioSettings, get_settings
from .constants import API_VERSION, HDR_X_MODIO_PLATFORM, HDR_X_MODIO_PORTAL
from .download import Downloader, download_action
from .exceptions import NetworkError, TimeoutError, TransportError
from .filters import Filter
from .log_config import logger
from .models import Terms
from .multipart import Form, StreamBody, iter_source
from .pagination import Query
from .resources import (
    CommentsClient,
    FilesClient,
    GamesClient,
    MeClient,
    ModsClient,
    ReportsClient,
    UploadsClient,
)
from .response import classify_response
from .routing import Host, ListRoute, Route, Routes
from .types import RequestData
from .upload import MultipartUploader

T = TypeVar("T")

RequestBody = Mapping[str, Any] | Form | StreamBody | None
"""The body kinds accepted by the request pipeline.

A mapping is sent url-encoded, a `Form` as streamed multipart/form-data and a
`StreamBody` as raw bytes.
"""


class ModioClient:
    """Asynchronous client for interacting with the mod.io API.

    The client holds the credentials, the host selection and one shared
    `httpx.AsyncClient`. The transport handles connection pooling, redirects
    (bounded, dropping `Authorization` on cross-origin hops) and response
    compression for every request.

    Resource clients for the different mod.io entities are available as
    properties of this client.

    Typical usage:
    ```python
    async with ModioClient(api_key="...") as client:
        game = await client.games.get(5)
        async for mod in client.mods.list(5).iter():
            print(mod.name)
    ```

    Attributes:
        games (GamesClient): Client for game endpoints.
        mods (ModsClient): Client for mod endpoints.
        files (FilesClient): Client for modfile endpoints.
        me (MeClient): Client for the endpoints of the authenticated user.
        uploads (UploadsClient): Client for multipart upload session endpoints.
        _settings (ModioSettings): The resolved settings for this client instance.
        _credentials (Credentials): The API key and/or token of this client.
        _host (Host): Host selection for requests.
        _http_client (httpx.AsyncClient): The shared transport.
        _should_close_client (bool): Flag indicating if this instance owns the transport.
    """

    def __init__(
        self,
        settings: ModioSettings | None = None,
        *,
        api_key: str | None = None,
        token: str | None = None,
        host: Host | str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initializes the ModioClient.

        Credentials passed directly to this constructor take precedence over
        those in `settings`.

        Args:
            settings: An optional `ModioSettings` instance. If `None`, global
                settings are loaded via `modloom.config.get_settings()`.
            api_key: The mod.io API key used for read-only endpoints.
            token: An OAuth2 access token used for endpoints acting on behalf
                of a user.
            host: A `Host` or a custom host authority. If `None`, the host is
                selected from `settings`.
            http_client: Optional pre-configured httpx.AsyncClient instance. A
                client passed in here is not closed by `aclose()`.
        """
        self._settings: ModioSettings = settings or get_settings()
        self._credentials = Credentials(
            api_key=api_key or self._settings.api_key,
            token=token or self._settings.token,
        )
        self._host: Host = self._resolve_host(host)
        logger.info(
            f"Using host {self._host.authority} "
            f"(per-game hosts: {self._host.per_game}), "
            f"api_key: {self._credentials.api_key is not None}, "
            f"token: {self._credentials.token is not None}"
        )

        # HTTP client setup
        self._should_close_client = http_client is None  # Close only if we created it
        self._http_client = http_client or self._create_default_http_client()

        self._init_resources()
        logger.debug("ModioClient initialized.")

    def _init_resources(self) -> None:
        self._games = GamesClient(api_client=self)
        self._mods = ModsClient(api_client=self)
        self._files = FilesClient(api_client=self)
        self._me = MeClient(api_client=self)
        self._uploads = UploadsClient(api_client=self)
        self._comments = CommentsClient(api_client=self)
        self._reports = ReportsClient(api_client=self)

    def _resolve_host(self, host: Host | str | None) -> Host:
        if isinstance(host, Host):
            return host
        if host is not None:
            return Host.custom(host)
        if self._settings.game_id is not None:
            return Host.game(self._settings.game_id)
        if self._settings.use_test_env:
            return Host.test()
        if self._settings.dynamic_game_host:
            return Host.dynamic(self._settings.host)
        return Host.custom(self._settings.host)

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings.

        Returns:
            httpx.AsyncClient: Configured HTTP client with SSL verification,
                timeout, redirect settings and user agent header.
        """
        try:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            verify_ssl: ssl.SSLContext | bool = ssl_context
            logger.debug("Using certifi SSL context.")
        except (OSError, ssl.SSLError):
            verify_ssl = True
            logger.warning(
                "certifi not found or failed to load. Using default SSL verification."
            )

        return httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            follow_redirects=True,
            max_redirects=self._settings.max_redirects,
            headers={"User-Agent": self._settings.user_agent},
        )

    # --- Resource clients ---

    @property
    def games(self) -> GamesClient:
        """Provides access to the GamesClient for game endpoints."""
        return self._games

    @property
    def mods(self) -> ModsClient:
        """Provides access to the ModsClient for mod endpoints."""
        return self._mods

    @property
    def files(self) -> FilesClient:
        """Provides access to the FilesClient for modfile endpoints."""
        return self._files

    @property
    def me(self) -> MeClient:
        """Provides access to the MeClient for the authenticated user."""
        return self._me

    @property
    def uploads(self) -> UploadsClient:
        """Provides access to the UploadsClient for multipart upload sessions."""
        return self._uploads

    @property
    def comments(self) -> CommentsClient:
        """Provides access to the CommentsClient for mod comments."""
        return self._comments

    @property
    def reports(self) -> ReportsClient:
        """Provides access to the ReportsClient for reporting games, mods and users."""
        return self._reports

    @property
    def settings(self) -> ModioSettings:
        return self._settings

    @property
    def host(self) -> Host:
        return self._host

    def with_token(self, token: str) -> Self:
        """Returns a client that uses `token` and shares this client's transport.

        The returned client never closes the shared transport; close the
        original client when done.
        """
        client = copy.copy(self)
        client._credentials = self._credentials.with_token(token)
        client._should_close_client = False
        client._init_resources()
        logger.debug(f"Derived client {id(client)} with a new token from {id(self)}.")
        return client

    # --- Request pipeline ---

    def url_for(self, route: Route) -> str:
        """Returns the absolute URL of a route, honoring host selection."""
        return f"https://{self._host.resolve(route.game_id)}/v{API_VERSION}{route.path}"

    def _default_headers(self) -> dict[str, str]:
        headers = {"User-Agent": self._settings.user_agent}
        if self._settings.target_platform is not None:
            headers[HDR_X_MODIO_PLATFORM] = self._settings.target_platform.value
        if self._settings.target_portal is not None:
            headers[HDR_X_MODIO_PORTAL] = self._settings.target_portal.value
        return headers

    def _request_data(
        self,
        route: Route,
        *,
        filter: Filter | None = None,
        body: RequestBody = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestData:
        params: dict[str, Any] = filter.to_query() if filter is not None else {}
        params.update(route.query)

        request_data = RequestData(
            method=route.method,
            url=self.url_for(route),
            params=params or None,
            headers={**self._default_headers(), **(headers or {})},
        )
        if isinstance(body, Form):
            request_data.multipart = body
        elif isinstance(body, StreamBody):
            request_data.content = iter_source(body.source)
        elif body is not None:
            request_data.data = {k: v for k, v in body.items() if v is not None}
        return request_data

    def _run_pre_request_hooks(self, request_data: RequestData) -> None:
        if not self._settings.pre_request_hooks:
            return
        hook_params: dict[str, Any] | None = (
            dict(request_data.params) if request_data.params is not None else None
        )
        hook_headers: httpx.Headers = httpx.Headers(request_data.headers)
        logger.debug(
            f"Executing {len(self._settings.pre_request_hooks)} pre-request hooks "
            f"for {request_data.method} {request_data.url}"
        )
        for hook in self._settings.pre_request_hooks:
            try:
                hook(request_data.method, request_data.url, hook_params, hook_headers)
            except Exception as e:
                logger.exception(
                    f"Error executing pre-request hook {getattr(hook, '__name__', str(hook))}: {e}"
                )
        request_data.params = hook_params
        request_data.headers = {k: v for k, v in hook_headers.items()}

    def _run_post_request_hooks(self, response: httpx.Response, parsed: Any) -> None:
        if not self._settings.post_request_hooks:
            return
        logger.debug(
            f"Executing {len(self._settings.post_request_hooks)} post-request hooks "
            f"for {response.request.method} {_redact(response.request.url)}"
        )
        for hook in self._settings.post_request_hooks:
            try:
                hook(response, parsed)
            except Exception as e:
                logger.exception(
                    f"Error executing post-request hook {getattr(hook, '__name__', str(hook))}: {e}"
                )

    async def build_request(
        self,
        route: Route,
        *,
        filter: Filter | None = None,
        body: RequestBody = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Builds the authenticated request for a route without sending it.

        Args:
            route: The endpoint to call.
            filter: Optional filter, sorting and paging parameters.
            body: Optional request body, see `RequestBody`.
            headers: Optional extra headers, e.g. `Content-Range`.

        Returns:
            httpx.Request: The request, ready to be sent. A multipart body is
                consumed by building it.

        Raises:
            ApiKeyRequiredError: If the route needs an API key the client lacks.
            TokenRequiredError: If the route needs a token the client lacks.
            InvalidHeaderError: If a header cannot be represented.
            FormConsumedError: If a multipart form was already streamed.
        """
        strategy = self._credentials.for_method(route.auth)
        request_data = self._request_data(route, filter=filter, body=body, headers=headers)
        self._run_pre_request_hooks(request_data)
        request = request_data.build_request()
        await strategy.async_authenticate(request)
        return request

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        """Sends a request through the shared transport.

        Args:
            request: The request to send.
            stream: Return as soon as the headers are received and leave the
                body to be read by the caller.

        Returns:
            httpx.Response: The response, whatever its status.

        Raises:
            TimeoutError: If the request times out.
            NetworkError: For connection, DNS or TLS failures.
            TransportError: For any other transport failure, e.g. too many redirects.
        """
        url = _redact(request.url)
        logger.debug(f"Sending request: {request.method} {url}")
        logger.trace(f"Request Headers: {_redact_headers(request.headers)}")
        try:
            response = await self._http_client.send(request, stream=stream)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {url}: {e}")
            raise NetworkError(f"Network error for {url}: {e}", request=request) from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error for {url}: {e}")
            raise TransportError(
                f"HTTP request error for {url}: {e}", request=request
            ) from e

        logger.debug(f"Received response: {response.status_code} for {url}")
        logger.trace(f"Response Headers: {response.headers}")
        return response

    async def request(
        self,
        route: Route,
        *,
        model: type[T] | Any | None = None,
        filter: Filter | None = None,
        body: RequestBody = None,
        headers: Mapping[str, str] | None = None,
    ) -> T | Any | None:
        """Performs an API call and returns the decoded response.

        Args:
            route: The endpoint to call.
            model: The expected success type, or None when no body is expected.
            filter: Optional filter, sorting and paging parameters.
            body: Optional request body, see `RequestBody`.
            headers: Optional extra headers.

        Returns:
            The decoded success value, or None for bodiless successes.

        Raises:
            BuilderError: If the request cannot be built (see `build_request`).
            TransportError: If the exchange itself fails (see `send`).
            BodyStreamError: If a streamed body source fails while sending.
            RateLimitError: If the API asks to retry later.
            APIError: For error responses of the API.
            DecodeError: If a body does not decode into the expected type.
        """
        request = await self.build_request(route, filter=filter, body=body, headers=headers)
        response = await self.send(request)
        parsed = classify_response(response, model)
        self._run_post_request_hooks(response, parsed)
        return parsed

    async def stream_url(self, url: str) -> httpx.Response:
        """Opens a streaming GET request to an absolute URL.

        Used for signed download URLs, which carry their own authorization.
        The caller must close the returned response.

        Raises:
            TransportError: If the exchange itself fails.
            RateLimitError, APIError, DecodeError: For non-2xx responses.
        """
        request = httpx.Request("GET", url, headers={"User-Agent": self._settings.user_agent})
        response = await self.send(request, stream=True)
        if not response.is_success:
            try:
                await response.aread()
            finally:
                await response.aclose()
            classify_response(response, None)
        return response

    # --- Entry points ---

    def query(self, route: ListRoute, model: type[T], filter: Filter | None = None) -> Query[T]:
        """Creates a lazy query over a list endpoint.

        Args:
            route: A list endpoint. Only `ListRoute`s support paging.
            model: The item type of the list.
            filter: Optional filter, sorting and paging parameters.

        Returns:
            Query[T]: The query; nothing is sent until it is consumed.

        Raises:
            TypeError: If `route` is not a list endpoint.
        """
        if not isinstance(route, ListRoute):
            raise TypeError(f"{route.method} {route.path} is not a list endpoint")
        return Query(self, route, model, filter or Filter())

    def download(self, action: Any) -> Downloader:
        """Creates a downloader for a mod, a file or a version of a mod.

        Args:
            action: A `DownloadAction`, or anything `download_action()` accepts:
                a `Mod`, a `File`, `(game_id, mod_id)`,
                `(game_id, mod_id, file_id)` or `(game_id, mod_id, version)`.
        """
        return Downloader(self, download_action(action))

    def upload(
        self, game_id: int, mod_id: int, filename: str, nonce: str | None = None
    ) -> MultipartUploader:
        """Creates an uploader for a multipart upload session of a mod."""
        return MultipartUploader(self, game_id, mod_id, filename, nonce=nonce)

    async def terms(self) -> Terms:
        """Fetches the mod.io terms of use text and buttons."""
        return await self.request(Routes.terms(), model=Terms)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if this instance created it."""
        logger.info(
            f"ModioClient.aclose() called. Client ID: {id(self)}. "
            f"HTTP client to close: {self._should_close_client}. "
            f"HTTP client closed: {self._http_client.is_closed}"
        )
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.info(f"ModioClient internal HTTP client closed. Client ID: {id(self)}.")
        await self._credentials.async_close()

    async def __aenter__(self) -> Self:
        """Enter the async context manager.

        Returns:
            Self: The client instance for use in async context.
        """
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Exit the async context manager and clean up resources."""
        await self.aclose()


def _redact(url: httpx.URL) -> httpx.URL:
    if "api_key" in url.params:
        return url.copy_set_param("api_key", "***")
    return url


def _redact_headers(headers: httpx.Headers) -> dict[str, str]:
    return {
        k: ("Bearer ***" if k.lower() == "authorization" else v) for k, v in headers.items()
    }
