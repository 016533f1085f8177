from datetime import datetime, timedelta, timezone

import pytest
import requests

from redditkit.errors import (
    APIError,
    ErrorResponse,
    JSONErrorResponse,
    Rate,
    RateLimitError,
)

URL = "https://api.example.com/x"


def _http_response(status, method="GET", url=URL):
    response = requests.Response()
    response.status_code = status
    response.request = requests.Request(method, url).prepare()
    return response


def test_api_error_from_list_formats_message():
    error = APIError.from_list(["BAD_SR_NAME", "that name is invalid", "sr"])
    assert error.label == "BAD_SR_NAME"
    assert error.reason == "that name is invalid"
    assert error.field == "sr"
    assert str(error) == 'field "sr" caused BAD_SR_NAME: that name is invalid'


def test_api_error_from_short_list_pads_with_empty_strings():
    error = APIError.from_list(["LABEL"])
    assert (error.label, error.reason, error.field) == ("LABEL", "", "")


def test_api_error_from_list_rejects_non_list():
    with pytest.raises(TypeError):
        APIError.from_list("LABEL")


def test_api_error_from_list_rejects_non_string_items():
    with pytest.raises(TypeError):
        APIError.from_list(["LABEL", 3, "field"])


def test_error_response_message():
    error = ErrorResponse(_http_response(404), "not found")
    assert str(error) == f"GET {URL}: 404 not found"


def test_json_error_response_joins_errors():
    errors = [APIError("A", "first", "f1"), APIError("B", "second", "f2")]
    error = JSONErrorResponse(_http_response(200, method="POST"), errors)
    assert error.errors == errors
    assert str(error) == f"POST {URL}: 200 {errors[0]};{errors[1]}"


def test_rate_limit_reset_in_future():
    now = datetime(2020, 1, 1, tzinfo=timezone.utc)
    error = RateLimitError(Rate(reset=now + timedelta(seconds=90)), _http_response(429))
    assert error.reset_message(now) == "[rate limit will reset in 1m30s]"


def test_rate_limit_reset_in_past():
    now = datetime(2020, 1, 1, tzinfo=timezone.utc)
    error = RateLimitError(Rate(reset=now - timedelta(seconds=5)), _http_response(429))
    assert error.reset_message(now) == "[rate limit was reset 5s ago]"


def test_rate_limit_reset_rounds_to_seconds():
    now = datetime(2020, 1, 1, tzinfo=timezone.utc)
    exact = RateLimitError(Rate(reset=now + timedelta(hours=1)), _http_response(429))
    nudged = RateLimitError(
        Rate(reset=now + timedelta(hours=1, milliseconds=300)), _http_response(429)
    )
    assert nudged.reset_message(now) == exact.reset_message(now)
    assert exact.reset_message(now) == "[rate limit will reset in 1h0m0s]"


def test_rate_limit_error_string_includes_request_and_reset():
    reset = datetime.now(timezone.utc) + timedelta(minutes=10)
    error = RateLimitError(Rate(reset=reset), _http_response(429), "slow down")
    text = str(error)
    assert text.startswith(f"GET {URL}: 429 slow down [rate limit will reset in ")
    assert error.message == "slow down"