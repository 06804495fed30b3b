"""Emojis: graphic elements usable in post and user flair."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .transport import Response, Transport

_DEFAULT_SET = "snoomojis"
_SUBREDDIT_PREFIX = "t5"


@dataclass
class Emoji:
    """A graphic element you can include in a post flair or user flair."""

    name: str = ""
    url: str = ""
    user_flair_allowed: bool = False
    post_flair_allowed: bool = False
    mod_flair_only: bool = False
    # ID of the user who created this emoji.
    created_by: str = ""

    @classmethod
    def from_json(cls, name: str, data: dict[str, Any]) -> "Emoji":
        """Build an emoji from its name and the object the API keys by that name."""
        return cls(
            name=name,
            url=data.get("url") or "",
            user_flair_allowed=bool(data.get("user_flair_allowed")),
            post_flair_allowed=bool(data.get("post_flair_allowed")),
            mod_flair_only=bool(data.get("mod_flair_only")),
            created_by=data.get("created_by") or "",
        )


def _emoji_list(mapping: Any) -> list[Emoji]:
    if not isinstance(mapping, dict):
        return []
    return [Emoji.from_json(name, value or {}) for name, value in mapping.items()]


@dataclass
class EmojiCreateOrUpdateRequest:
    """A request to create or update an emoji."""

    name: str = ""
    user_flair_allowed: bool | None = None
    post_flair_allowed: bool | None = None
    mod_flair_only: bool | None = None

    def validate(self) -> None:
        """Raise ValueError if the request cannot be sent."""
        if not self.name:
            raise ValueError("name: cannot be empty")

    def to_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {"name": self.name}
        optional = (
            ("user_flair_allowed", self.user_flair_allowed),
            ("post_flair_allowed", self.post_flair_allowed),
            ("mod_flair_only", self.mod_flair_only),
        )
        for key, value in optional:
            if value is not None:
                form[key] = value
        return form


def _checked(request: EmojiCreateOrUpdateRequest | None) -> EmojiCreateOrUpdateRequest:
    if request is None:
        raise ValueError("request: cannot be None")
    request.validate()
    return request


class EmojiService:
    """Emoji related API calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def get(self, subreddit: str) -> tuple[list[Emoji], list[Emoji]]:
        """Return the default emojis and those of the subreddit, in that order."""
        data, _ = self._transport.request("GET", f"api/v1/{subreddit}/emojis/all")
        root = data if isinstance(data, dict) else {}
        default = _emoji_list(root.get(_DEFAULT_SET))
        own = next(
            (
                _emoji_list(value)
                for key, value in root.items()
                if key.startswith(_SUBREDDIT_PREFIX)
            ),
            [],
        )
        return default, own

    def delete(self, subreddit: str, emoji: str) -> Response:
        """Delete the emoji from the subreddit."""
        _, response = self._transport.request(
            "DELETE", f"api/v1/{subreddit}/emoji/{emoji}"
        )
        return response

    def set_size(self, subreddit: str, height: int, width: int) -> Response:
        """Set the custom emoji size; both sides between 1 and 40 inclusive."""
        _, response = self._transport.request(
            "POST",
            f"api/v1/{subreddit}/emoji_custom_size",
            form={"height": height, "width": width},
        )
        return response

    def disable_custom_size(self, subreddit: str) -> Response:
        """Disable the custom emoji size in the subreddit."""
        _, response = self._transport.request(
            "POST", f"api/v1/{subreddit}/emoji_custom_size"
        )
        return response

    def _lease(self, subreddit: str, image_path: str) -> tuple[str, dict[str, str]]:
        mimetype = "image/png" if image_path.lower().endswith(".png") else "image/jpeg"
        data, _ = self._transport.request(
            "POST",
            f"api/v1/{subreddit}/emoji_asset_upload_s3.json",
            form={"filepath": image_path, "mimetype": mimetype},
        )
        lease = (data or {}).get("s3UploadLease") or {}
        upload_url = f"http:{lease.get('action') or ''}"
        fields = {
            item.get("name") or "": item.get("value") or ""
            for item in lease.get("fields") or []
        }
        return upload_url, fields

    def upload(
        self,
        subreddit: str,
        create_request: EmojiCreateOrUpdateRequest | None,
        image_path: str | Path,
    ) -> Response:
        """Upload an image file as a new emoji in the subreddit."""
        request = _checked(create_request)
        path = str(image_path)
        upload_url, fields = self._lease(subreddit, path)
        # The storage service ignores fields placed after the file.
        self._transport.post_multipart(upload_url, fields, "file", path)
        form = request.to_form()
        form["s3_key"] = fields.get("key", "")
        _, response = self._transport.request(
            "POST", f"api/v1/{subreddit}/emoji.json", form=form
        )
        return response

    def update(
        self, subreddit: str, update_request: EmojiCreateOrUpdateRequest | None
    ) -> Response:
        """Update an emoji's permissions in the subreddit."""
        request = _checked(update_request)
        _, response = self._transport.request(
            "POST", f"api/v1/{subreddit}/emoji_permissions", form=request.to_form()
        )
        return response