"""Flair: tags attached to users or posts within a subreddit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .transport import Response, Transport

_MAX_CHANGES = 100


@dataclass
class Flair:
    """A tag that can be attached to a user or a post."""

    id: str = ""
    type: str = ""
    text: str = ""
    color: str = ""
    background_color: str = ""
    css_class: str = ""
    editable: bool = False
    mod_only: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Flair":
        return cls(
            id=data.get("id") or "",
            type=data.get("type") or "",
            text=data.get("text") or "",
            color=data.get("text_color") or "",
            background_color=data.get("background_color") or "",
            css_class=data.get("css_class") or "",
            editable=bool(data.get("text_editable")),
            mod_only=bool(data.get("mod_only")),
        )


@dataclass
class FlairSummary:
    """A condensed view of a user's flair."""

    user: str = ""
    text: str = ""
    css_class: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FlairSummary":
        return cls(
            user=data.get("user") or "",
            text=data.get("flair_text") or "",
            css_class=data.get("flair_css_class") or "",
        )


@dataclass
class FlairChoice:
    """A flair that can be selected for yourself or for a post."""

    template_id: str = ""
    text: str = ""
    editable: bool = False
    position: str = ""
    css_class: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FlairChoice":
        return cls(
            template_id=data.get("flair_template_id") or "",
            text=data.get("flair_text") or "",
            editable=bool(data.get("flair_text_editable")),
            position=data.get("flair_position") or "",
            css_class=data.get("flair_css_class") or "",
        )


def _put(form: dict[str, Any], key: str, value: Any) -> None:
    """Add a value unless it is None or an empty string."""
    if value is None or value == "":
        return
    form[key] = value


@dataclass
class FlairConfigureRequest:
    """A request to configure a subreddit's flair settings.

    Leaving a setting unset can have side effects, so set every one.
    """

    user_flair_enabled: bool | None = None
    user_flair_position: str = ""
    user_flair_self_assign_enabled: bool | None = None
    post_flair_position: str = ""
    post_flair_self_assign_enabled: bool | None = None

    def to_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {}
        _put(form, "flair_enabled", self.user_flair_enabled)
        _put(form, "flair_position", self.user_flair_position)
        _put(form, "flair_self_assign_enabled", self.user_flair_self_assign_enabled)
        _put(form, "link_flair_position", self.post_flair_position)
        _put(form, "link_flair_self_assign_enabled", self.post_flair_self_assign_enabled)
        return form


@dataclass
class FlairTemplateCreateOrUpdateRequest:
    """A request to create a flair template, or update one when id is given."""

    id: str = ""
    allowable_content: str = ""
    text: str = ""
    text_color: str = ""
    text_editable: bool | None = None
    mod_only: bool | None = None
    max_emojis: int | None = None
    background_color: str = ""
    css_class: str = ""

    def to_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {}
        _put(form, "flair_template_id", self.id)
        _put(form, "allowable_content", self.allowable_content)
        _put(form, "text", self.text)
        _put(form, "text_color", self.text_color)
        _put(form, "text_editable", self.text_editable)
        _put(form, "mod_only", self.mod_only)
        _put(form, "max_emojis", self.max_emojis)
        _put(form, "background_color", self.background_color)
        _put(form, "css_class", self.css_class)
        return form


@dataclass
class FlairTemplate:
    """A flair template for users (USER_FLAIR) or posts (LINK_FLAIR)."""

    id: str = ""
    type: str = ""
    mod_only: bool = False
    allowable_content: str = ""
    text: str = ""
    text_type: str = ""
    text_color: str = ""
    text_editable: bool = False
    rich_text: list[dict[str, str]] = field(default_factory=list)
    override_css: bool = False
    max_emojis: int = 0
    background_color: str = ""
    css_class: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FlairTemplate":
        return cls(
            id=data.get("id") or "",
            type=data.get("flairType") or "",
            mod_only=bool(data.get("modOnly")),
            allowable_content=data.get("allowableContent") or "",
            text=data.get("text") or "",
            text_type=data.get("type") or "",
            text_color=data.get("textColor") or "",
            text_editable=bool(data.get("textEditable")),
            rich_text=[dict(item) for item in data.get("richtext") or []],
            override_css=bool(data.get("overrideCss")),
            max_emojis=int(data.get("maxEmojis") or 0),
            background_color=data.get("backgroundColor") or "",
            css_class=data.get("cssClass") or "",
        )


@dataclass
class FlairSelectRequest:
    """A request to select a flair template, optionally with custom text."""

    id: str = ""
    text: str = ""

    def to_form(self) -> dict[str, Any]:
        form: dict[str, Any] = {}
        _put(form, "flair_template_id", self.id)
        _put(form, "text", self.text)
        return form


@dataclass
class FlairChangeRequest:
    """A change to one user's flair; empty text and class clear it."""

    user: str
    text: str = ""
    css_class: str = ""


@dataclass
class FlairChangeResponse:
    """The outcome of one change from a batch of flair changes."""

    ok: bool = False
    status: str = ""
    warnings: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FlairChangeResponse":
        return cls(
            ok=bool(data.get("ok")),
            status=data.get("status") or "",
            warnings=dict(data.get("warnings") or {}),
            errors=dict(data.get("errors") or {}),
        )


def _csv_field(value: str) -> str:
    needs_quotes = value == "\\." or any(ch in value for ch in ',"\r\n') or (
        value[:1] in (" ", "\t")
    )
    if not needs_quotes:
        return value
    return '"' + value.replace('"', '""') + '"'


def _csv(rows: Iterable[Iterable[str]]) -> str:
    return "".join(",".join(_csv_field(value) for value in row) + "\n" for row in rows)


def _require(request: Any) -> None:
    if request is None:
        raise ValueError("request: cannot be None")


class FlairService:
    """Flair related API calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def _post(self, path: str, form: dict[str, Any]) -> Response:
        _, response = self._transport.request("POST", path, form=form)
        return response

    def get_user_flairs(self, subreddit: str) -> list[Flair]:
        """Return the user flairs of the subreddit."""
        data, _ = self._transport.request("GET", f"r/{subreddit}/api/user_flair_v2")
        return [Flair.from_json(item) for item in data or []]

    def get_post_flairs(self, subreddit: str) -> list[Flair]:
        """Return the post flairs of the subreddit."""
        data, _ = self._transport.request("GET", f"r/{subreddit}/api/link_flair_v2")
        return [Flair.from_json(item) for item in data or []]

    def list_user_flairs(self, subreddit: str) -> list[FlairSummary]:
        """Return the flairs of individual users in the subreddit."""
        data, _ = self._transport.request("GET", f"r/{subreddit}/api/flairlist")
        users = (data or {}).get("users") or []
        return [FlairSummary.from_json(item) for item in users]

    def configure(self, subreddit: str, request: FlairConfigureRequest | None) -> Response:
        """Configure the subreddit's flair settings."""
        _require(request)
        form = request.to_form()
        form["api_type"] = "json"
        return self._post(f"r/{subreddit}/api/flairconfig", form)

    def enable(self, subreddit: str) -> Response:
        """Enable your flair in the subreddit."""
        return self._post(
            f"r/{subreddit}/api/setflairenabled",
            {"api_type": "json", "flair_enabled": True},
        )

    def disable(self, subreddit: str) -> Response:
        """Disable your flair in the subreddit."""
        return self._post(
            f"r/{subreddit}/api/setflairenabled",
            {"api_type": "json", "flair_enabled": False},
        )

    def _upsert_template(
        self, subreddit: str, request: FlairTemplateCreateOrUpdateRequest | None, kind: str
    ) -> FlairTemplate:
        _require(request)
        form = request.to_form()
        form["api_type"] = "json"
        form["flair_type"] = kind
        data, _ = self._transport.request(
            "POST", f"r/{subreddit}/api/flairtemplate_v2", form=form
        )
        return FlairTemplate.from_json(data or {})

    def upsert_user_template(
        self, subreddit: str, request: FlairTemplateCreateOrUpdateRequest | None
    ) -> FlairTemplate:
        """Create a user flair template, or update it if request.id is valid."""
        return self._upsert_template(subreddit, request, "USER_FLAIR")

    def upsert_post_template(
        self, subreddit: str, request: FlairTemplateCreateOrUpdateRequest | None
    ) -> FlairTemplate:
        """Create a post flair template, or update it if request.id is valid."""
        return self._upsert_template(subreddit, request, "LINK_FLAIR")

    def delete(self, subreddit: str, username: str) -> Response:
        """Delete the flair of the user."""
        return self._post(
            f"r/{subreddit}/api/deleteflair", {"api_type": "json", "name": username}
        )

    def delete_template(self, subreddit: str, id: str) -> Response:
        """Delete a flair template by its id."""
        return self._post(
            f"r/{subreddit}/api/deleteflairtemplate",
            {"api_type": "json", "flair_template_id": id},
        )

    def delete_all_user_templates(self, subreddit: str) -> Response:
        return self._post(
            f"r/{subreddit}/api/clearflairtemplates",
            {"api_type": "json", "flair_type": "USER_FLAIR"},
        )

    def delete_all_post_templates(self, subreddit: str) -> Response:
        return self._post(
            f"r/{subreddit}/api/clearflairtemplates",
            {"api_type": "json", "flair_type": "LINK_FLAIR"},
        )

    def _reorder(self, subreddit: str, kind: str, ids: Iterable[str]) -> Response:
        _, response = self._transport.request(
            "PATCH",
            f"api/v1/{subreddit}/flair_template_order/{kind}",
            json_body=list(ids),
        )
        return response

    def reorder_user_templates(self, subreddit: str, ids: Iterable[str]) -> Response:
        """Reorder user flair templates; every template id must be given."""
        return self._reorder(subreddit, "USER_FLAIR", ids)

    def reorder_post_templates(self, subreddit: str, ids: Iterable[str]) -> Response:
        """Reorder post flair templates; every template id must be given."""
        return self._reorder(subreddit, "LINK_FLAIR", ids)

    def _choices(
        self, path: str, form: dict[str, Any]
    ) -> tuple[list[FlairChoice], FlairChoice | None]:
        data, _ = self._transport.request("POST", path, form=form)
        data = data or {}
        choices = [FlairChoice.from_json(item) for item in data.get("choices") or []]
        current = data.get("current")
        return choices, FlairChoice.from_json(current) if current else None

    def choices(self, subreddit: str) -> tuple[list[FlairChoice], FlairChoice | None]:
        """Return the flairs you can assign yourself, and your current one."""
        return self.choices_of(subreddit, self._transport.username)

    def choices_of(
        self, subreddit: str, username: str
    ) -> tuple[list[FlairChoice], FlairChoice | None]:
        """Return the flairs the user can assign themself, and their current one."""
        return self._choices(f"r/{subreddit}/api/flairselector", {"name": username})

    def choices_for_post(self, post_id: str) -> tuple[list[FlairChoice], FlairChoice | None]:
        """Return the flairs available to an existing post, and its current one."""
        return self._choices("api/flairselector", {"link": post_id})

    def choices_for_new_post(self, subreddit: str) -> list[FlairChoice]:
        """Return the flairs you can assign to a new post in the subreddit."""
        choices, _ = self._choices(
            f"r/{subreddit}/api/flairselector", {"is_newlink": True}
        )
        return choices

    def select(self, subreddit: str, request: FlairSelectRequest | None) -> Response:
        """Select a flair to display next to your username in the subreddit."""
        return self.assign(subreddit, self._transport.username, request)

    def assign(
        self, subreddit: str, user: str, request: FlairSelectRequest | None
    ) -> Response:
        """Assign a flair to a user in the subreddit."""
        _require(request)
        form = request.to_form()
        form["api_type"] = "json"
        form["name"] = user
        return self._post(f"r/{subreddit}/api/selectflair", form)

    def select_for_post(self, post_id: str, request: FlairSelectRequest | None) -> Response:
        """Assign a flair to the post."""
        _require(request)
        form = request.to_form()
        form["api_type"] = "json"
        form["link"] = post_id
        return self._post("api/selectflair", form)

    def remove_from_post(self, post_id: str) -> Response:
        """Remove the flair from the post."""
        return self._post("api/selectflair", {"api_type": "json", "link": post_id})

    def change(
        self, subreddit: str, requests: list[FlairChangeRequest] | None
    ) -> list[FlairChangeResponse]:
        """Change the flair of up to 100 users at once."""
        requests = list(requests or [])
        if not 1 <= len(requests) <= _MAX_CHANGES:
            raise ValueError("requests: must provide between 1 and 100")
        csv_text = _csv((r.user, r.text, r.css_class) for r in requests)
        data, _ = self._transport.request(
            "POST", f"r/{subreddit}/api/flaircsv", form={"flair_csv": csv_text}
        )
        return [FlairChangeResponse.from_json(item) for item in data or []]