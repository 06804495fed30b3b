"""Account related API calls: settings and relationships with other users."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from .transport import Response, Transport, parse_timestamp


@dataclass
class SubredditKarma:
    """Karma earned by the user in one subreddit."""

    subreddit: str = ""
    post_karma: int = 0
    comment_karma: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SubredditKarma":
        return cls(
            subreddit=data.get("sr") or "",
            post_karma=int(data.get("link_karma") or 0),
            comment_karma=int(data.get("comment_karma") or 0),
        )


def _setting(key: str) -> Any:
    return field(default=None, metadata={"json": key})


@dataclass
class Settings:
    """Account preferences. A value of None means the setting is absent."""

    accept_private_messages: str | None = _setting("accept_pms")
    activity_relevant_ads: bool | None = _setting("activity_relevant_ads")
    allow_click_tracking: bool | None = _setting("allow_clicktracking")
    beta: bool | None = _setting("beta")
    show_recently_viewed_posts: bool | None = _setting("clickgadget")
    collapse_read_messages: bool | None = _setting("collapse_read_messages")
    compress: bool | None = _setting("compress")
    creddit_autorenew: bool | None = _setting("creddit_autorenew")
    default_comment_sort: str | None = _setting("default_comment_sort")
    show_domain_details: bool | None = _setting("domain_details")
    send_email_digests: bool | None = _setting("email_digests")
    send_messages_as_emails: bool | None = _setting("email_messages")
    unsubscribe_from_all_emails: bool | None = _setting("email_unsubscribe_all")
    disable_custom_themes: bool | None = _setting("enable_default_themes")
    location: str | None = _setting("geopopular")
    hide_ads: bool | None = _setting("hide_ads")
    hide_from_search_engines: bool | None = _setting("hide_from_robots")
    hide_upvoted_posts: bool | None = _setting("hide_ups")
    hide_downvoted_posts: bool | None = _setting("hide_downs")
    highlight_controversial_comments: bool | None = _setting("highlight_controversial")
    highlight_new_comments: bool | None = _setting("highlight_new_comments")
    ignore_suggested_sorts: bool | None = _setting("ignore_suggested_sort")
    use_new_reddit: bool | None = _setting("in_redesign_beta")
    uses_new_reddit: bool | None = _setting("design_beta")
    label_nsfw: bool | None = _setting("label_nsfw")
    language: str | None = _setting("lang")
    show_old_search_page: bool | None = _setting("legacy_search")
    enable_notifications: bool | None = _setting("live_orangereds")
    mark_messages_as_read: bool | None = _setting("mark_messages_read")
    show_thumbnails: str | None = _setting("media")
    auto_expand_media: str | None = _setting("media_preview")
    minimum_comment_score: int | None = _setting("min_comment_score")
    minimum_post_score: int | None = _setting("min_link_score")
    enable_mention_notifications: bool | None = _setting("monitor_mentions")
    open_links_in_new_window: bool | None = _setting("newwindow")
    dark_mode: bool | None = _setting("nightmode")
    disable_profanity: bool | None = _setting("no_profanity")
    number_of_comments: int | None = _setting("num_comments")
    number_of_posts: int | None = _setting("numsites")
    show_spotlight_box: bool | None = _setting("organic")
    subreddit_theme: str | None = _setting("other_theme")
    show_nsfw: bool | None = _setting("over_18")
    enable_private_rss_feeds: bool | None = _setting("private_feeds")
    profile_opt_out: bool | None = _setting("profile_opt_out")
    publicize_votes: bool | None = _setting("public_votes")
    allow_research: bool | None = _setting("research")
    include_nsfw_search_results: bool | None = _setting("search_include_over_18")
    receive_crosspost_messages: bool | None = _setting("send_crosspost_messages")
    receive_welcome_messages: bool | None = _setting("send_welcome_messages")
    show_user_flair: bool | None = _setting("show_flair")
    show_post_flair: bool | None = _setting("show_link_flair")
    show_gold_expiration: bool | None = _setting("show_gold_expiration")
    show_location_based_recommendations: bool | None = _setting(
        "show_location_based_recommendations"
    )
    show_promote: bool | None = _setting("show_promote")
    show_custom_subreddit_themes: bool | None = _setting("show_stylesheets")
    show_trending_subreddits: bool | None = _setting("show_trending")
    show_twitter: bool | None = _setting("show_twitter")
    store_visits: bool | None = _setting("store_visits")
    theme_selector: str | None = _setting("theme_selector")
    allow_third_party_data_ad_personalization: bool | None = _setting(
        "third_party_data_personalized_ads"
    )
    allow_third_party_site_data_ad_personalization: bool | None = _setting(
        "third_party_site_data_personalized_ads"
    )
    allow_third_party_site_data_content_personalization: bool | None = _setting(
        "third_party_site_data_personalized_content"
    )
    enable_threaded_messages: bool | None = _setting("threaded_messages")
    enable_threaded_modmail: bool | None = _setting("threaded_modmail")
    top_karma_subreddits: bool | None = _setting("top_karma_subreddits")
    use_global_defaults: bool | None = _setting("use_global_defaults")
    enable_video_autoplay: bool | None = _setting("video_autoplay")

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Settings":
        """Build settings from the API's preference object; unknown keys are ignored."""
        return cls(**{f.name: data.get(f.metadata["json"]) for f in fields(cls)})

    def to_json(self) -> dict[str, Any]:
        """The preference object to send, leaving out settings that are None."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.metadata["json"]] = value
        return result


@dataclass(frozen=True)
class _Relationship:
    """A relationship with another user (friend, blocked or trusted)."""

    id: str = ""
    user: str = ""
    user_id: str = ""
    created: datetime | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "_Relationship":
        return cls(
            id=data.get("rel_id") or "",
            user=data.get("name") or "",
            user_id=data.get("id") or "",
            created=parse_timestamp(data.get("date")),
        )


def _relationships(listing: Any) -> list[_Relationship]:
    if not isinstance(listing, dict):
        return []
    children = (listing.get("data") or {}).get("children") or []
    return [_Relationship.from_json(child) for child in children]


def _pair(data: Any) -> tuple[Any, Any]:
    items = list(data) if isinstance(data, list) else []
    items += [None] * (2 - len(items))
    return items[0], items[1]


class AccountService:
    """Calls concerning the authenticated account."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def settings(self) -> Settings:
        """Return your account settings."""
        data, _ = self._transport.request("GET", "api/v1/me/prefs")
        return Settings.from_json(data or {})

    def update_settings(self, settings: Settings) -> Settings:
        """Update your account settings and return the modified version."""
        data, _ = self._transport.request(
            "PATCH", "api/v1/me/prefs", json_body=settings.to_json()
        )
        return Settings.from_json(data or {})

    def friends(self) -> list[_Relationship]:
        """Return your friends."""
        data, _ = self._transport.request("GET", "prefs/friends")
        first, _ = _pair(data)
        return _relationships(first)

    def blocked(self) -> list[_Relationship]:
        """Return the users you have blocked."""
        data, _ = self._transport.request("GET", "prefs/blocked")
        return _relationships(data)

    def messaging(self) -> tuple[list[_Relationship], list[_Relationship]]:
        """Return blocked users and trusted users, in that order."""
        data, _ = self._transport.request("GET", "prefs/messaging")
        blocked, trusted = _pair(data)
        return _relationships(blocked), _relationships(trusted)

    def trusted(self) -> list[_Relationship]:
        """Return your trusted users."""
        data, _ = self._transport.request("GET", "prefs/trusted")
        return _relationships(data)

    def add_trusted(self, username: str) -> Response:
        """Add a user to your trusted users."""
        _, response = self._transport.request(
            "POST", "api/add_whitelisted", form={"api_type": "json", "name": username}
        )
        return response

    def remove_trusted(self, username: str) -> Response:
        """Remove a user from your trusted users."""
        _, response = self._transport.request(
            "POST", "api/remove_whitelisted", form={"name": username}
        )
        return response