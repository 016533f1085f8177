"""Exceptions raised when the API reports a failure."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence


@dataclass(frozen=True)
class Rate:
    """Last known rate limit state of a client."""

    remaining: float = 0.0
    used: int = 0
    reset: datetime | None = None


def _describe(response: Any) -> str:
    request = response.request
    return f"{request.method} {request.url}: {response.status_code}"


def _format_seconds(total: int) -> str:
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


class APIError(Exception):
    """A single error reported by the API: a label, a reason and the field at fault."""

    def __init__(self, label: str = "", reason: str = "", field: str = "") -> None:
        super().__init__(label, reason, field)
        self.label = label
        self.reason = reason
        self.field = field

    def __str__(self) -> str:
        quoted = json.dumps(self.field, ensure_ascii=False)
        return f"field {quoted} caused {self.label}: {self.reason}"

    @classmethod
    def from_list(cls, values: Sequence[Any]) -> "APIError":
        """Build an error from the ``[label, reason, field]`` triple the API sends."""
        if not isinstance(values, (list, tuple)):
            raise TypeError("an API error must be a list of strings")
        items = list(values[:3])
        if any(item is not None and not isinstance(item, str) for item in items):
            raise TypeError("an API error must be a list of strings")
        padded = [item or "" for item in items] + [""] * (3 - len(items))
        return cls(*padded)


class ErrorResponse(Exception):
    """An API request answered with an unsuccessful status code."""

    def __init__(self, response: Any, message: str = "") -> None:
        super().__init__(message)
        self.response = response
        self.message = message

    def __str__(self) -> str:
        return f"{_describe(self.response)} {self.message}"


class JSONErrorResponse(Exception):
    """Errors reported inside the body of an otherwise successful response."""

    def __init__(self, response: Any, errors: Iterable[APIError]) -> None:
        self.errors = list(errors)
        super().__init__(*self.errors)
        self.response = response

    def __str__(self) -> str:
        joined = ";".join(str(error) for error in self.errors)
        return f"{_describe(self.response)} {joined}"


class RateLimitError(Exception):
    """The client sent too many requests in the current time window."""

    def __init__(self, rate: Rate, response: Any, message: str = "") -> None:
        super().__init__(message)
        self.rate = rate
        self.response = response
        self.message = message

    def __str__(self) -> str:
        return f"{_describe(self.response)} {self.message} {self.reset_message()}"

    def reset_message(self, now: datetime | None = None) -> str:
        """Describe when the rate limit resets, relative to ``now``."""
        if now is None:
            now = datetime.now(timezone.utc)
        reset = self.rate.reset if self.rate.reset is not None else now
        delta = (reset - now).total_seconds()
        rounded = math.floor(abs(delta) + 0.5)
        if delta < 0 and rounded:
            return f"[rate limit was reset {_format_seconds(rounded)} ago]"
        return f"[rate limit will reset in {_format_seconds(rounded)}]"