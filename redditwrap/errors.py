"""Errors raised when an API call fails."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import requests
from requests.structures import CaseInsensitiveDict


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Rate:
    """The last known rate limit state of the client."""

    remaining: float = 0.0
    used: int = 0
    reset: datetime = field(default_factory=_now)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "Rate":
        """Build a rate from the X-Ratelimit-* response headers."""
        lookup = CaseInsensitiveDict(headers)

        def number(name: str) -> float:
            try:
                return float(lookup.get(name, ""))
            except (TypeError, ValueError):
                return 0.0

        return cls(
            remaining=number("x-ratelimit-remaining"),
            used=int(number("x-ratelimit-used")),
            reset=_now() + timedelta(seconds=int(number("x-ratelimit-reset"))),
        )


def _describe(response: requests.Response, message: str) -> str:
    request = response.request
    method = request.method if request is not None else ""
    url = request.url if request is not None else response.url
    return f"{method} {url}: {response.status_code} {message}"


class APIError(Exception):
    """A single error reported by the API: a label, a reason and a field."""

    def __init__(self, label: str = "", reason: str = "", field: str = "") -> None:
        super().__init__(label, reason, field)
        self.label = label
        self.reason = reason
        self.field = field

    @classmethod
    def from_json(cls, data: Any) -> "APIError":
        """Build an error from its three-element JSON array form."""
        if not isinstance(data, (list, tuple)):
            raise ValueError(f"expected an array for an API error, got {data!r}")
        items = [("" if item is None else item) for item in list(data)[:3]]
        if any(not isinstance(item, str) for item in items):
            raise ValueError(f"API error entries must be strings: {data!r}")
        items += [""] * (3 - len(items))
        return cls(*items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIError):
            return NotImplemented
        return (self.label, self.reason, self.field) == (other.label, other.reason, other.field)

    def __hash__(self) -> int:
        return hash((self.label, self.reason, self.field))

    def __str__(self) -> str:
        return f"field {json.dumps(self.field)} caused {self.label}: {self.reason}"


class JSONErrorResponse(Exception):
    """Errors listed in a JSON body, sometimes sent with a 200 status."""

    def __init__(self, response: requests.Response, errors: list[APIError]) -> None:
        super().__init__(response, errors)
        self.response = response
        self.errors = errors

    def __str__(self) -> str:
        return _describe(self.response, ";".join(str(error) for error in self.errors))


class ErrorResponse(Exception):
    """A failed HTTP response from the API."""

    def __init__(self, response: requests.Response, message: str = "") -> None:
        super().__init__(response, message)
        self.response = response
        self.message = message

    def __str__(self) -> str:
        return _describe(self.response, self.message)


class RateLimitError(Exception):
    """Raised when too many requests were sent in a given time frame."""

    def __init__(self, rate: Rate, response: requests.Response, message: str = "") -> None:
        super().__init__(rate, response, message)
        self.rate = rate
        self.response = response
        self.message = message

    def format_rate_reset(self) -> str:
        """Describe when the rate limit resets, relative to now."""
        seconds = (self.rate.reset - _now()).total_seconds()
        rounded = int(abs(seconds) + 0.5)
        if seconds < 0:
            rounded = -rounded
        if rounded < 0:
            return f"[rate limit was reset {_format_duration(-rounded)} ago]"
        return f"[rate limit will reset in {_format_duration(rounded)}]"

    def __str__(self) -> str:
        return f"{_describe(self.response, self.message)} {self.format_rate_reset()}"


def _format_duration(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def _json_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def check_response(response: requests.Response) -> None:
    """Raise the matching error if the response reports a failure."""
    status = response.status_code
    body = _json_body(response)
    if 200 <= status < 300:
        if isinstance(body, dict) and isinstance(body.get("json"), dict):
            raw_errors = body["json"].get("errors") or []
            if raw_errors:
                raise JSONErrorResponse(response, [APIError.from_json(item) for item in raw_errors])
        return

    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str):
        message = ""
    if status == 429:
        raise RateLimitError(Rate.from_headers(response.headers), response, message)
    raise ErrorResponse(response, message)