"""HTTP client that sends requests to the API and turns failures into exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

import requests

from .errors import APIError, ErrorResponse, JSONErrorResponse, Rate, RateLimitError

DEFAULT_BASE_URL = "https://oauth.reddit.com"
DEFAULT_USER_AGENT = "redditkit"

_HEADER_REMAINING = "X-Ratelimit-Remaining"
_HEADER_USED = "X-Ratelimit-Used"
_HEADER_RESET = "X-Ratelimit-Reset"

RequestCallback = Callable[[requests.PreparedRequest, requests.Response], None]


def _parse_rate(headers: Mapping[str, str], now: datetime | None = None) -> Rate:
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        remaining = float(headers.get(_HEADER_REMAINING, 0) or 0)
    except ValueError:
        remaining = 0.0
    try:
        used = int(float(headers.get(_HEADER_USED, 0) or 0))
    except ValueError:
        used = 0
    reset = None
    value = headers.get(_HEADER_RESET)
    if value:
        try:
            reset = now + timedelta(seconds=float(value))
        except ValueError:
            reset = None
    return Rate(remaining=remaining, used=used, reset=reset)


def _try_json(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


@dataclass
class Response:
    """A successful API response together with its rate limit information."""

    http_response: requests.Response
    rate: Rate = field(default_factory=Rate)
    after: str = ""

    @classmethod
    def from_http(cls, http_response: requests.Response) -> "Response":
        return cls(http_response=http_response, rate=_parse_rate(http_response.headers))

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.http_response.headers

    def json(self) -> Any:
        """Decode the body as JSON, or return None if it is empty."""
        if not self.http_response.content:
            return None
        return self.http_response.json()


def check_response(response: requests.Response) -> None:
    """Raise the matching exception if the response reports an error."""
    payload = _try_json(response)
    if 200 <= response.status_code < 300:
        if isinstance(payload, dict):
            inner = payload.get("json")
            if isinstance(inner, dict):
                errors = inner.get("errors") or []
                if errors:
                    raise JSONErrorResponse(
                        response, [APIError.from_list(error) for error in errors]
                    )
        return

    message = ""
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = payload["message"]
    elif response.reason:
        message = response.reason

    if response.status_code == 429:
        raise RateLimitError(_parse_rate(response.headers), response, message)
    raise ErrorResponse(response, message)


class Client:
    """Sends requests to the API on behalf of the services."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        token: str | None = None,
        username: str = "",
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.token = token
        self.username = username
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._on_request_completed: RequestCallback | None = None

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.session.close()

    def on_request_completed(self, callback: RequestCallback | None) -> None:
        """Call ``callback(request, response)`` after every completed request."""
        self._on_request_completed = callback

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        json_body: Any = None,
    ) -> Response:
        """Send a request and return the response, raising on API errors."""
        headers = {"User-Agent": self.user_agent}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        http_response = self.session.request(
            method,
            self._url(path),
            params=params,
            data=dict(form) if form else None,
            json=json_body,
            headers=headers,
            timeout=self.timeout,
        )
        if self._on_request_completed is not None:
            self._on_request_completed(http_response.request, http_response)

        check_response(http_response)
        return Response.from_http(http_response)