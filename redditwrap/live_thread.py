"""Live threads: threads that carry real-time updates."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Mapping

from .transport import Response, Transport, parse_timestamp

_KIND_LIVE_THREAD = "LiveUpdateEvent"
_KIND_LIVE_UPDATE = "LiveUpdate"

REPORT_REASONS = frozenset(
    {
        "spam",
        "vote-manipulation",
        "personal-information",
        "sexualizing-minors",
        "site-breaking",
    }
)


@dataclass
class LiveThread:
    """A thread that provides real-time updates."""

    id: str = ""
    full_id: str = ""
    created: datetime | None = None
    title: str = ""
    description: str = ""
    resources: str = ""
    state: str = ""
    viewer_count: int = 0
    viewer_count_fuzzed: bool = False
    # Empty once the thread has ended.
    websocket_url: str = ""
    announcement: bool = False
    nsfw: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LiveThread":
        return cls(
            id=data.get("id") or "",
            full_id=data.get("name") or "",
            created=parse_timestamp(data.get("created_utc")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            resources=data.get("resources") or "",
            state=data.get("state") or "",
            viewer_count=int(data.get("viewer_count") or 0),
            viewer_count_fuzzed=bool(data.get("viewer_count_fuzzed")),
            websocket_url=data.get("websocket_url") or "",
            announcement=bool(data.get("is_announcement")),
            nsfw=bool(data.get("nsfw")),
        )


@dataclass
class LiveThreadUpdate:
    """An update posted in a live thread."""

    id: str = ""
    full_id: str = ""
    author: str = ""
    created: datetime | None = None
    body: str = ""
    embedded_urls: list[str] = field(default_factory=list)
    stricken: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LiveThreadUpdate":
        return cls(
            id=data.get("id") or "",
            full_id=data.get("name") or "",
            author=data.get("author") or "",
            created=parse_timestamp(data.get("created_utc")),
            body=data.get("body") or "",
            embedded_urls=[embed.get("url") or "" for embed in data.get("embeds") or []],
            stricken=bool(data.get("stricken")),
        )


@dataclass
class LiveThreadCreateOrUpdateRequest:
    """A request to create or configure a live thread. Title is at most 120 characters."""

    title: str = ""
    description: str = ""
    resources: str = ""
    nsfw: bool | None = None

    def to_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {}
        if self.title:
            form["title"] = self.title
        if self.description:
            form["description"] = self.description
        if self.resources:
            form["resources"] = self.resources
        if self.nsfw is not None:
            form["nsfw"] = self.nsfw
        return form


@dataclass
class LiveThreadContributor:
    """A user that can contribute to a live thread."""

    id: str = ""
    name: str = ""
    permissions: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LiveThreadContributor":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            permissions=list(data.get("permissions") or []),
        )


def _contributor_list(listing: Any) -> list[LiveThreadContributor]:
    if not isinstance(listing, dict):
        return []
    children = (listing.get("data") or {}).get("children") or []
    return [LiveThreadContributor.from_json(child) for child in children]


@dataclass
class LiveThreadContributors:
    """Current contributors, and invited ones if you may manage contributors."""

    current: list[LiveThreadContributor] = field(default_factory=list)
    invited: list[LiveThreadContributor] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "LiveThreadContributors":
        """Accept either a single listing or a pair of listings."""
        if isinstance(data, dict):
            return cls(current=_contributor_list(data))
        if isinstance(data, list):
            current = _contributor_list(data[0]) if len(data) > 0 else []
            invited = _contributor_list(data[1]) if len(data) > 1 else []
            return cls(current=current, invited=invited)
        raise ValueError(f"unexpected contributors payload: {data!r}")


@dataclass
class LiveThreadPermissions:
    """Permissions a contributor has, or lacks, in a live thread."""

    all: bool = False
    close: bool = False
    discussions: bool = False
    edit: bool = False
    manage: bool = False
    settings: bool = False
    # Posting updates to the thread.
    update: bool = False

    def __str__(self) -> str:
        return ",".join(
            ("+" if getattr(self, f.name) else "-") + f.name for f in fields(self)
        )


def permissions_string(permissions: LiveThreadPermissions | None) -> str:
    """The permission string sent to the API; None grants everything."""
    if permissions is None:
        return "+all"
    return str(permissions)


def _thing_data(data: Any) -> dict[str, Any]:
    if isinstance(data, dict):
        inner = data.get("data")
        if isinstance(inner, dict):
            return inner
    return {}


def _listing_children(data: Any, kind: str) -> list[dict[str, Any]]:
    children = _thing_data(data).get("children") or []
    return [
        child.get("data") or {}
        for child in children
        if isinstance(child, dict) and child.get("kind") == kind
    ]


class LiveThreadService:
    """Live thread related API calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def _post(self, path: str, form: dict[str, Any]) -> Response:
        _, response = self._transport.request("POST", path, form=form)
        return response

    def now(self) -> LiveThread | None:
        """Return the currently featured live thread, or None if there is none."""
        data, response = self._transport.request("GET", "api/live/happening_now")
        if data is None and response.status_code == 204:
            return None
        return LiveThread.from_json(_thing_data(data))

    def get(self, id: str) -> LiveThread:
        """Get information about a live thread."""
        data, _ = self._transport.request("GET", f"live/{id}/about")
        return LiveThread.from_json(_thing_data(data))

    def get_multiple(self, *ids: str) -> list[LiveThread]:
        """Get information about several live threads."""
        if not ids:
            raise ValueError("must provide at least 1 id")
        data, _ = self._transport.request("GET", f"api/live/by_id/{','.join(ids)}")
        return [
            LiveThread.from_json(item) for item in _listing_children(data, _KIND_LIVE_THREAD)
        ]

    def update(self, id: str, text: str) -> Response:
        """Post an update to the live thread. Requires the "update" permission."""
        return self._post(f"api/live/{id}/update", {"api_type": "json", "body": text})

    def updates(
        self, id: str, opts: Mapping[str, Any] | None = None
    ) -> list[LiveThreadUpdate]:
        """Return the updates posted in the live thread; opts are listing options."""
        data, _ = self._transport.request(
            "GET", f"live/{id}", params=dict(opts) if opts else None
        )
        return [
            LiveThreadUpdate.from_json(item)
            for item in _listing_children(data, _KIND_LIVE_UPDATE)
        ]

    def update_by_id(self, thread_id: str, update_id: str) -> LiveThreadUpdate | None:
        """Return one update by its short id, or None if it is not found."""
        data, _ = self._transport.request("GET", f"live/{thread_id}/updates/{update_id}")
        items = _listing_children(data, _KIND_LIVE_UPDATE)
        return LiveThreadUpdate.from_json(items[0]) if items else None

    def strike(self, thread_id: str, update_id: str) -> Response:
        """Mark an update as incorrect and cross it out."""
        return self._post(
            f"api/live/{thread_id}/strike_update", {"api_type": "json", "id": update_id}
        )

    def delete(self, thread_id: str, update_id: str) -> Response:
        """Delete an update from the live thread."""
        return self._post(
            f"api/live/{thread_id}/delete_update", {"api_type": "json", "id": update_id}
        )

    def create(self, request: LiveThreadCreateOrUpdateRequest | None) -> str:
        """Create a live thread and return its id."""
        if request is None:
            raise ValueError("request: cannot be None")
        form = request.to_form()
        form["api_type"] = "json"
        data, _ = self._transport.request("POST", "api/live/create", form=form)
        payload = ((data or {}).get("json") or {}).get("data") or {}
        return payload.get("id") or ""

    def close(self, id: str) -> Response:
        """Close the thread permanently."""
        return self._post(f"api/live/{id}/close_thread", {"api_type": "json"})

    def configure(
        self, id: str, request: LiveThreadCreateOrUpdateRequest | None
    ) -> Response:
        """Configure the thread. Requires the "settings" permission."""
        if request is None:
            raise ValueError("request: cannot be None")
        form = request.to_form()
        form["api_type"] = "json"
        return self._post(f"api/live/{id}/edit", form)

    def contributors(self, id: str) -> LiveThreadContributors:
        """Return the contributors, and invited ones when you may manage them."""
        data, _ = self._transport.request("GET", f"live/{id}/contributors")
        return LiveThreadContributors.from_json(data if data is not None else {})

    def accept(self, id: str) -> Response:
        """Accept a pending invite to contribute."""
        return self._post(f"api/live/{id}/accept_contributor_invite", {"api_type": "json"})

    def leave(self, id: str) -> Response:
        """Give up your status as contributor."""
        return self._post(f"api/live/{id}/leave_contributor", {"api_type": "json"})

    def _permissions_form(
        self, username: str, kind: str, permissions: LiveThreadPermissions | None
    ) -> dict[str, Any]:
        return {
            "api_type": "json",
            "name": username,
            "type": kind,
            "permissions": permissions_string(permissions),
        }

    def invite(
        self, id: str, username: str, permissions: LiveThreadPermissions | None = None
    ) -> Response:
        """Invite a user to contribute; None grants all permissions."""
        return self._post(
            f"api/live/{id}/invite_contributor",
            self._permissions_form(username, "liveupdate_contributor_invite", permissions),
        )

    def uninvite(self, thread_id: str, user_id: str) -> Response:
        """Withdraw an invitation, by the user's full ID."""
        return self._post(
            f"api/live/{thread_id}/rm_contributor_invite", {"api_type": "json", "id": user_id}
        )

    def set_permissions(
        self, id: str, username: str, permissions: LiveThreadPermissions | None = None
    ) -> Response:
        """Set a contributor's permissions; None grants all."""
        return self._post(
            f"api/live/{id}/set_contributor_permissions",
            self._permissions_form(username, "liveupdate_contributor", permissions),
        )

    def set_permissions_for_invite(
        self, id: str, username: str, permissions: LiveThreadPermissions | None = None
    ) -> Response:
        """Set the permissions of a pending invite; None grants all."""
        return self._post(
            f"api/live/{id}/set_contributor_permissions",
            self._permissions_form(username, "liveupdate_contributor_invite", permissions),
        )

    def revoke(self, thread_id: str, user_id: str) -> Response:
        """Revoke a user's contributorship, by their full ID."""
        return self._post(
            f"api/live/{thread_id}/rm_contributor", {"api_type": "json", "id": user_id}
        )

    def hide_discussion(self, thread_id: str, post_id: str) -> Response:
        """Hide a linked post (base36 id) from the discussion sidebar."""
        return self._post(
            f"api/live/{thread_id}/hide_discussion", {"api_type": "json", "link": post_id}
        )

    def unhide_discussion(self, thread_id: str, post_id: str) -> Response:
        """Unhide a linked post (base36 id) in the discussion sidebar."""
        return self._post(
            f"api/live/{thread_id}/unhide_discussion", {"api_type": "json", "link": post_id}
        )

    def report(self, id: str, reason: str) -> Response:
        """Report the live thread for one of the accepted reasons."""
        if reason not in REPORT_REASONS:
            raise ValueError("invalid reason for reporting live thread: " + reason)
        return self._post(f"api/live/{id}/report", {"api_type": "json", "type": reason})