"""HTTP transport shared by the API services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urljoin

import requests

from .errors import Rate, check_response

DEFAULT_BASE_URL = "https://oauth.reddit.com/"
DEFAULT_USER_AGENT = "redditwrap/0.1"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Turn a UTC epoch value, or the literal false, into a datetime."""
    if value is None:
        return None
    if value is False or value == "false":
        return _ZERO_TIME
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid timestamp: {value!r}") from exc
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


@dataclass
class Response:
    """The outcome of an API call."""

    http_response: requests.Response
    after: str = ""

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> Mapping[str, str]:
        return self.http_response.headers

    @property
    def rate(self) -> Rate:
        return Rate.from_headers(self.http_response.headers)


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _encode_form(form: Mapping[str, Any]) -> list[tuple[str, str]]:
    return [(key, _encode_value(value)) for key, value in form.items()]


class Transport:
    """Sends requests to the API and turns failures into exceptions."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        username: str = "",
        session: requests.Session | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.username = username
        self.session = session if session is not None else requests.Session()
        self.user_agent = user_agent

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        form: Mapping[str, Any] | None = None,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> tuple[Any, Response]:
        """Send a request; return the decoded JSON body (or None) and the response."""
        if form is not None and json_body is not None:
            raise ValueError("a request cannot carry both a form and a JSON body")

        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        kwargs: dict[str, Any] = {}
        if form is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            kwargs["data"] = _encode_form(form)
        elif json_body is not None:
            kwargs["json"] = json_body
        if params is not None:
            kwargs["params"] = _encode_form(params)

        http_response = self.session.request(
            method, self.url_for(path), headers=headers, **kwargs
        )
        check_response(http_response)

        data = None
        if http_response.content:
            try:
                data = http_response.json()
            except ValueError:
                data = None
        return data, Response(http_response)

    def post_multipart(
        self,
        url: str,
        fields: Mapping[str, Any],
        file_field: str,
        file_path: str | Path,
    ) -> Response:
        """POST a multipart form to an absolute URL, with the file after the fields."""
        path = Path(file_path)
        with path.open("rb") as handle:
            http_response = self.session.post(
                url,
                data=_encode_form(fields),
                files={file_field: (path.name, handle)},
                headers={"User-Agent": self.user_agent},
            )
        check_response(http_response)
        return Response(http_response)