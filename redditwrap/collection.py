"""Collections: mod curated groups of posts within a subreddit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .transport import Response, Transport, parse_timestamp

_BASE = "api/v1/collections"


@dataclass
class Collection:
    """A mod curated group of posts within a subreddit."""

    id: str = ""
    created: datetime | None = None
    updated: datetime | None = None
    title: str = ""
    description: str = ""
    permalink: str = ""
    layout: str = ""
    subreddit_id: str = ""
    author: str = ""
    author_id: str = ""
    primary_post_id: str = ""
    post_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Collection":
        return cls(
            id=data.get("collection_id") or "",
            created=parse_timestamp(data.get("created_at_utc")),
            updated=parse_timestamp(data.get("last_update_utc")),
            title=data.get("title") or "",
            description=data.get("description") or "",
            permalink=data.get("permalink") or "",
            layout=data.get("display_layout") or "",
            subreddit_id=data.get("subreddit_id") or "",
            author=data.get("author_name") or "",
            author_id=data.get("author_id") or "",
            primary_post_id=data.get("primary_link_id") or "",
            post_ids=list(data.get("link_ids") or []),
        )


@dataclass
class CollectionCreateRequest:
    """A request to create a collection. Layout is TIMELINE or GALLERY."""

    title: str
    subreddit_id: str
    description: str = ""
    layout: str = ""

    def to_form(self) -> dict[str, str]:
        form = {"title": self.title}
        if self.description:
            form["description"] = self.description
        form["sr_fullname"] = self.subreddit_id
        if self.layout:
            form["display_layout"] = self.layout
        return form


class CollectionService:
    """Collection related API calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def _post(self, endpoint: str, form: dict[str, Any]) -> Response:
        _, response = self._transport.request("POST", f"{_BASE}/{endpoint}", form=form)
        return response

    def get(self, id: str) -> Collection:
        """Get a collection by its ID."""
        data, _ = self._transport.request(
            "GET",
            f"{_BASE}/collection",
            params={"collection_id": id, "include_links": False},
        )
        return Collection.from_json(data or {})

    def from_subreddit(self, id: str) -> list[Collection]:
        """Get all collections in the subreddit with the given full ID."""
        data, _ = self._transport.request(
            "GET", f"{_BASE}/subreddit_collections", params={"sr_fullname": id}
        )
        return [Collection.from_json(item) for item in data or []]

    def create(self, create_request: CollectionCreateRequest | None) -> Collection:
        """Create a collection."""
        if create_request is None:
            raise ValueError("create_request: cannot be None")
        data, _ = self._transport.request(
            "POST", f"{_BASE}/create_collection", form=create_request.to_form()
        )
        return Collection.from_json(data or {})

    def delete(self, id: str) -> Response:
        return self._post("delete_collection", {"collection_id": id})

    def add_post(self, post_id: str, collection_id: str) -> Response:
        """Add a post (by full ID) to a collection."""
        return self._post(
            "add_post_to_collection",
            {"link_fullname": post_id, "collection_id": collection_id},
        )

    def remove_post(self, post_id: str, collection_id: str) -> Response:
        """Remove a post (by full ID) from a collection."""
        return self._post(
            "remove_post_in_collection",
            {"link_fullname": post_id, "collection_id": collection_id},
        )

    def reorder_posts(self, collection_id: str, *post_ids: str) -> Response:
        return self._post(
            "reorder_collection",
            {"collection_id": collection_id, "link_ids": ",".join(post_ids)},
        )

    def update_title(self, id: str, title: str) -> Response:
        return self._post("update_collection_title", {"collection_id": id, "title": title})

    def update_description(self, id: str, description: str) -> Response:
        return self._post(
            "update_collection_description",
            {"collection_id": id, "description": description},
        )

    def update_layout_timeline(self, id: str) -> Response:
        return self._post(
            "update_collection_display_layout",
            {"collection_id": id, "display_layout": "TIMELINE"},
        )

    def update_layout_gallery(self, id: str) -> Response:
        return self._post(
            "update_collection_display_layout",
            {"collection_id": id, "display_layout": "GALLERY"},
        )

    def follow(self, id: str) -> Response:
        return self._post("follow_collection", {"collection_id": id, "follow": True})

    def unfollow(self, id: str) -> Response:
        return self._post("follow_collection", {"collection_id": id, "follow": False})