"""Tests for the authentication strategies of modloom."""

import httpx
import pytest

from modloom.auth import ApiKeyAuth, AuthMethod, Credentials, StaticTokenAuth
from modloom.exceptions import (
    ApiKeyRequiredError,
    AuthMethodMismatchError,
    ConfigurationError,
    TokenRequiredError,
)


@pytest.mark.asyncio
async def test_api_key_auth_sets_query_parameter():
    auth = ApiKeyAuth("secret")
    request = httpx.Request("GET", "https://api.mod.io/v1/games?_limit=5")

    await auth.async_authenticate(request)

    assert request.url.params["api_key"] == "secret"
    assert request.url.params["_limit"] == "5"
    assert "Authorization" not in request.headers


@pytest.mark.asyncio
async def test_static_token_auth_sets_bearer_header():
    auth = StaticTokenAuth("abc")
    request = httpx.Request("GET", "https://api.mod.io/v1/me")

    await auth.async_authenticate(request)

    assert request.headers["Authorization"] == "Bearer abc"
    assert "api_key" not in request.url.params


@pytest.mark.asyncio
async def test_static_token_auth_accepts_bearer_prefix():
    auth = StaticTokenAuth("Bearer abc")
    request = httpx.Request("GET", "https://api.mod.io/v1/me")

    await auth.async_authenticate(request)

    assert request.headers["Authorization"] == "Bearer abc"


@pytest.mark.parametrize("strategy", [ApiKeyAuth, StaticTokenAuth])
@pytest.mark.parametrize("value", [None, ""])
def test_strategies_reject_empty_credentials(strategy, value):
    with pytest.raises(ConfigurationError):
        strategy(value)


def test_credentials_select_strategy_by_method():
    creds = Credentials(api_key="key", token="token")

    assert isinstance(creds.for_method(AuthMethod.API_KEY), ApiKeyAuth)
    assert isinstance(creds.for_method(AuthMethod.TOKEN), StaticTokenAuth)


def test_credentials_without_token():
    creds = Credentials(api_key="key")

    with pytest.raises(TokenRequiredError):
        creds.for_method(AuthMethod.TOKEN)


def test_credentials_without_api_key():
    creds = Credentials(token="token")

    with pytest.raises(ApiKeyRequiredError) as exc_info:
        creds.for_method(AuthMethod.API_KEY)
    assert isinstance(exc_info.value, AuthMethodMismatchError)


def test_credentials_with_token_keeps_api_key():
    creds = Credentials(api_key="key")
    derived = creds.with_token("new")

    assert derived.api_key is creds.api_key
    assert derived.token is not None
    assert creds.token is None


@pytest.mark.asyncio
async def test_credentials_async_close_is_idempotent():
    creds = Credentials(api_key="key", token="token")
    await creds.async_close()
    await creds.async_close()
