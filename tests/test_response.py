"""Tests for response classification."""

from datetime import UTC, datetime, timedelta
from email.utils import format_datetime

import httpx
import pytest

from modloom.exceptions import (
    APIError,
    DecodeError,
    NotFoundError,
    RateLimitError,
    TermsAcceptanceRequiredError,
    UnauthorizedError,
    ValidationError,
)
from modloom.models import Game, ListResponse
from modloom.response import classify_response, parse_retry_after

REQUEST = httpx.Request("GET", "https://api.mod.io/v1/games/5")


def error_json(code: int, message: str = "Something failed.", error_ref: int = 0, **extra):
    return {"error": {"code": code, "error_ref": error_ref, "message": message, **extra}}


def response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=REQUEST, **kwargs)


def test_success_decodes_model():
    resp = response(200, json={"id": 5, "name": "Game", "name_id": "game"})

    game = classify_response(resp, Game)

    assert isinstance(game, Game)
    assert game.id == 5


def test_success_decodes_generic_list_envelope():
    resp = response(
        200,
        json={
            "data": [{"id": 1, "name": "A", "name_id": "a"}],
            "result_count": 1,
            "result_offset": 0,
            "result_limit": 100,
            "result_total": 1,
        },
    )

    envelope = classify_response(resp, ListResponse[Game])

    assert envelope.total == 1
    assert envelope.data[0].name == "A"


@pytest.mark.parametrize(
    "resp",
    [
        response(204),
        response(201, json={"id": 1}),
    ],
)
def test_success_without_expected_body(resp):
    model = None if resp.status_code == 201 else Game
    assert classify_response(resp, model) is None


def test_empty_success_body_for_a_model_raises_decode_error():
    resp = response(200, content=b"")

    with pytest.raises(DecodeError) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.response is resp


def test_success_with_undecodable_body_raises_decode_error():
    resp = response(200, json={"unexpected": True})

    with pytest.raises(DecodeError) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.response is resp


def test_retry_after_seconds_wins_over_the_status():
    resp = response(429, headers={"Retry-After": "120"}, content=b"not json")

    with pytest.raises(RateLimitError) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.retry_after == timedelta(seconds=120)


def test_retry_after_on_other_statuses():
    resp = response(503, headers={"Retry-After": "3"}, json=error_json(503))

    with pytest.raises(RateLimitError) as exc_info:
        classify_response(resp, None)
    assert exc_info.value.retry_after == timedelta(seconds=3)


def test_retry_after_http_date():
    when = datetime.now(UTC) + timedelta(minutes=10)
    resp = response(429, headers={"Retry-After": format_datetime(when, usegmt=True)})

    delay = parse_retry_after(resp)

    assert delay is not None
    assert timedelta(minutes=9) < delay <= timedelta(minutes=10)


def test_retry_after_in_the_past_is_zero():
    resp = response(429, headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
    assert parse_retry_after(resp) == timedelta(0)


@pytest.mark.parametrize("value", [None, "", "soon", "²".encode("latin-1")])
def test_retry_after_missing_or_invalid(value):
    headers = {"Retry-After": value} if value is not None else {}
    assert parse_retry_after(response(429, headers=headers)) is None


def test_non_ascii_digit_retry_after_is_ignored():
    # A superscript two passes str.isdigit() but is not a number of seconds.
    resp = response(
        429,
        headers={"Retry-After": "²".encode("latin-1")},
        json=error_json(429, "Too many requests."),
    )

    with pytest.raises(APIError) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.status == 429


def test_rate_limit_without_retry_after_is_api_error():
    resp = response(429, json=error_json(429, "Too many requests.", 11008))

    with pytest.raises(APIError) as exc_info:
        classify_response(resp, None)
    assert not isinstance(exc_info.value, RateLimitError)
    assert exc_info.value.status == 429
    assert exc_info.value.error_ref == 11008


def test_validation_error_carries_field_errors():
    resp = response(
        422,
        json=error_json(
            422,
            "Validation Failed.",
            13009,
            errors={"version": "The version may not be greater than 30 characters."},
        ),
    )

    with pytest.raises(ValidationError) as exc_info:
        classify_response(resp, Game)

    error = exc_info.value
    assert error.status == 422
    assert error.code == 422
    assert error.error_ref == 13009
    assert error.message == "Validation Failed."
    assert error.field_errors == {
        "version": "The version may not be greater than 30 characters."
    }


@pytest.mark.parametrize(
    ("status", "error_ref", "expected"),
    [
        (401, 11005, UnauthorizedError),
        (403, 11051, TermsAcceptanceRequiredError),
        (404, 14001, NotFoundError),
    ],
)
def test_status_specific_errors(status, error_ref, expected):
    resp = response(status, json=error_json(status, error_ref=error_ref))

    with pytest.raises(expected) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.status == status


def test_forbidden_without_terms_ref_is_generic_api_error():
    resp = response(403, json=error_json(403, error_ref=15000))

    with pytest.raises(APIError) as exc_info:
        classify_response(resp, Game)
    assert type(exc_info.value) is APIError


def test_server_error_is_api_error():
    resp = response(500, json=error_json(500, "Internal error."))

    with pytest.raises(APIError) as exc_info:
        classify_response(resp, Game)
    assert exc_info.value.status == 500
    assert "Internal error." in str(exc_info.value)


def test_undecodable_error_body_raises_decode_error():
    resp = response(502, content=b"<html>Bad Gateway</html>")

    with pytest.raises(DecodeError):
        classify_response(resp, Game)
