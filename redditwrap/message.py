"""Private messages and inbox listings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from .transport import Response, Transport, parse_timestamp

_KIND_COMMENT = "t1"
_KIND_MESSAGE = "t4"


@dataclass
class Message:
    """A message, or a comment reply as it appears in the inbox."""

    id: str = ""
    full_id: str = ""
    created: datetime | None = None
    subject: str = ""
    text: str = ""
    parent_id: str = ""
    author: str = ""
    to: str = ""
    is_comment: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Message":
        return cls(
            id=data.get("id") or "",
            full_id=data.get("name") or "",
            created=parse_timestamp(data.get("created_utc")),
            subject=data.get("subject") or "",
            text=data.get("body") or "",
            parent_id=data.get("parent_id") or "",
            author=data.get("author") or "",
            to=data.get("dest") or "",
            is_comment=bool(data.get("was_comment")),
        )


@dataclass
class SendMessageRequest:
    """A request to send a message.

    ``to`` is a username, or /r/name for that subreddit's moderators.
    ``from_subreddit`` makes the message look like it came from the subreddit.
    """

    to: str
    subject: str
    text: str
    from_subreddit: str = ""

    def to_form(self) -> dict[str, str]:
        form = {"to": self.to, "subject": self.subject, "text": self.text}
        if self.from_subreddit:
            form["from_sr"] = self.from_subreddit
        return form


def _require_ids(ids: tuple[str, ...]) -> str:
    if not ids:
        raise ValueError("must provide at least 1 id")
    return ",".join(ids)


class MessageService:
    """Message related API calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def _post(self, path: str, form: dict[str, Any] | None = None) -> Response:
        _, response = self._transport.request("POST", path, form=form)
        return response

    def read_all(self) -> Response:
        """Queue marking every message as read; a 202 acknowledges the request."""
        return self._post("api/read_all_messages")

    def read(self, *ids: str) -> Response:
        """Mark messages or comments as read, by full ID."""
        return self._post("api/read_message", {"id": _require_ids(ids)})

    def unread(self, *ids: str) -> Response:
        """Mark messages or comments as unread, by full ID."""
        return self._post("api/unread_message", {"id": _require_ids(ids)})

    def block(self, id: str) -> Response:
        """Block the author of a post, comment or message, by full ID."""
        return self._post("api/block", {"id": id})

    def collapse(self, *ids: str) -> Response:
        return self._post("api/collapse_message", {"id": _require_ids(ids)})

    def uncollapse(self, *ids: str) -> Response:
        return self._post("api/uncollapse_message", {"id": _require_ids(ids)})

    def delete(self, id: str) -> Response:
        return self._post("api/del_msg", {"id": id})

    def send(self, send_request: SendMessageRequest | None) -> Response:
        """Send a message."""
        if send_request is None:
            raise ValueError("send_request: cannot be None")
        form: dict[str, Any] = send_request.to_form()
        form["api_type"] = "json"
        return self._post("api/compose", form)

    def _listing(
        self, path: str, opts: Mapping[str, Any] | None
    ) -> tuple[list[Message], list[Message]]:
        data, _ = self._transport.request(
            "GET", path, params=dict(opts) if opts else None
        )
        inner = (data or {}).get("data") if isinstance(data, dict) else None
        children = (inner or {}).get("children") or []
        comments: list[Message] = []
        messages: list[Message] = []
        for child in children:
            if not isinstance(child, dict):
                continue
            kind = child.get("kind")
            if kind == _KIND_COMMENT:
                comments.append(Message.from_json(child.get("data") or {}))
            elif kind == _KIND_MESSAGE:
                messages.append(Message.from_json(child.get("data") or {}))
        return comments, messages

    def inbox(
        self, opts: Mapping[str, Any] | None = None
    ) -> tuple[list[Message], list[Message]]:
        """Return the comments and messages in your inbox, in that order."""
        return self._listing("message/inbox", opts)

    def inbox_unread(
        self, opts: Mapping[str, Any] | None = None
    ) -> tuple[list[Message], list[Message]]:
        """Return the unread comments and messages in your inbox, in that order."""
        return self._listing("message/unread", opts)

    def sent(self, opts: Mapping[str, Any] | None = None) -> list[Message]:
        """Return the messages you have sent."""
        _, messages = self._listing("message/sent", opts)
        return messages