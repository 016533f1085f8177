"""Account endpoints: karma, preferences and relationships with other users."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Mapping

from .client import Client, Response


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


@dataclass
class SubredditKarma:
    """Karma earned in a single subreddit."""

    subreddit: str = ""
    post_karma: int = 0
    comment_karma: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SubredditKarma":
        return cls(
            subreddit=data.get("sr") or "",
            post_karma=int(data.get("link_karma") or 0),
            comment_karma=int(data.get("comment_karma") or 0),
        )


@dataclass
class Relationship:
    """A relationship with another user, such as a friend or a blocked user."""

    id: str = ""
    user: str = ""
    user_id: str = ""
    created: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Relationship":
        return cls(
            id=data.get("rel_id") or "",
            user=data.get("name") or "",
            user_id=data.get("id") or "",
            created=_timestamp(data.get("date")),
        )


def _pref(key: str) -> Any:
    return field(default=None, metadata={"json": key})


@dataclass
class Settings:
    """The account's preferences. Unset values are None and are not sent."""

    accept_private_messages: str | None = _pref("accept_pms")
    activity_relevant_ads: bool | None = _pref("activity_relevant_ads")
    allow_click_tracking: bool | None = _pref("allow_clicktracking")
    beta: bool | None = _pref("beta")
    show_recently_viewed_posts: bool | None = _pref("clickgadget")
    collapse_read_messages: bool | None = _pref("collapse_read_messages")
    compress: bool | None = _pref("compress")
    creddit_autorenew: bool | None = _pref("creddit_autorenew")
    default_comment_sort: str | None = _pref("default_comment_sort")
    show_domain_details: bool | None = _pref("domain_details")
    send_email_digests: bool | None = _pref("email_digests")
    send_messages_as_emails: bool | None = _pref("email_messages")
    unsubscribe_from_all_emails: bool | None = _pref("email_unsubscribe_all")
    disable_custom_themes: bool | None = _pref("enable_default_themes")
    location: str | None = _pref("geopopular")
    hide_ads: bool | None = _pref("hide_ads")
    hide_from_search_engines: bool | None = _pref("hide_from_robots")
    hide_upvoted_posts: bool | None = _pref("hide_ups")
    hide_downvoted_posts: bool | None = _pref("hide_downs")
    highlight_controversial_comments: bool | None = _pref("highlight_controversial")
    highlight_new_comments: bool | None = _pref("highlight_new_comments")
    ignore_suggested_sorts: bool | None = _pref("ignore_suggested_sort")
    use_new_reddit: bool | None = _pref("in_redesign_beta")
    uses_new_reddit: bool | None = _pref("design_beta")
    label_nsfw: bool | None = _pref("label_nsfw")
    language: str | None = _pref("lang")
    show_old_search_page: bool | None = _pref("legacy_search")
    enable_notifications: bool | None = _pref("live_orangereds")
    mark_messages_as_read: bool | None = _pref("mark_messages_read")
    show_thumbnails: str | None = _pref("media")
    auto_expand_media: str | None = _pref("media_preview")
    minimum_comment_score: int | None = _pref("min_comment_score")
    minimum_post_score: int | None = _pref("min_link_score")
    enable_mention_notifications: bool | None = _pref("monitor_mentions")
    open_links_in_new_window: bool | None = _pref("newwindow")
    dark_mode: bool | None = _pref("nightmode")
    disable_profanity: bool | None = _pref("no_profanity")
    number_of_comments: int | None = _pref("num_comments")
    number_of_posts: int | None = _pref("numsites")
    show_spotlight_box: bool | None = _pref("organic")
    subreddit_theme: str | None = _pref("other_theme")
    show_nsfw: bool | None = _pref("over_18")
    enable_private_rss_feeds: bool | None = _pref("private_feeds")
    profile_opt_out: bool | None = _pref("profile_opt_out")
    publicize_votes: bool | None = _pref("public_votes")
    allow_research: bool | None = _pref("research")
    include_nsfw_search_results: bool | None = _pref("search_include_over_18")
    receive_crosspost_messages: bool | None = _pref("send_crosspost_messages")
    receive_welcome_messages: bool | None = _pref("send_welcome_messages")
    show_user_flair: bool | None = _pref("show_flair")
    show_post_flair: bool | None = _pref("show_link_flair")
    show_gold_expiration: bool | None = _pref("show_gold_expiration")
    show_location_based_recommendations: bool | None = _pref(
        "show_location_based_recommendations"
    )
    show_promote: bool | None = _pref("show_promote")
    show_custom_subreddit_themes: bool | None = _pref("show_stylesheets")
    show_trending_subreddits: bool | None = _pref("show_trending")
    show_twitter: bool | None = _pref("show_twitter")
    store_visits: bool | None = _pref("store_visits")
    theme_selector: str | None = _pref("theme_selector")
    allow_third_party_data_ad_personalization: bool | None = _pref(
        "third_party_data_personalized_ads"
    )
    allow_third_party_site_data_ad_personalization: bool | None = _pref(
        "third_party_site_data_personalized_ads"
    )
    allow_third_party_site_data_content_personalization: bool | None = _pref(
        "third_party_site_data_personalized_content"
    )
    enable_threaded_messages: bool | None = _pref("threaded_messages")
    enable_threaded_modmail: bool | None = _pref("threaded_modmail")
    top_karma_subreddits: bool | None = _pref("top_karma_subreddits")
    use_global_defaults: bool | None = _pref("use_global_defaults")
    enable_video_autoplay: bool | None = _pref("video_autoplay")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Read the settings from the API's JSON object, ignoring unknown keys."""
        values = {
            f.name: data[f.metadata["json"]]
            for f in fields(cls)
            if data.get(f.metadata["json"]) is not None
        }
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """The settings as the API's JSON object, leaving out unset values."""
        return {
            f.metadata["json"]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _relationships(listing: Any) -> list[Relationship]:
    if not isinstance(listing, Mapping):
        return []
    data = listing.get("data") or {}
    return [Relationship.from_dict(item) for item in data.get("children") or []]


def _listing_at(payload: Any, index: int) -> Any:
    if isinstance(payload, list) and len(payload) > index:
        return payload[index]
    return None


class AccountService:
    """Account endpoints of the API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def karma(self) -> tuple[list[SubredditKarma], Response]:
        """A breakdown of your karma per subreddit."""
        resp = self.client.request("GET", "api/v1/me/karma")
        payload = resp.json()
        items = payload.get("data") if isinstance(payload, Mapping) else payload
        return [SubredditKarma.from_dict(item) for item in items or []], resp

    def settings(self) -> tuple[Settings, Response]:
        """Your account settings."""
        resp = self.client.request("GET", "api/v1/me/prefs")
        return Settings.from_dict(resp.json() or {}), resp

    def update_settings(self, settings: Settings | None) -> tuple[Settings, Response]:
        """Update your account settings and return the modified version."""
        body = settings.to_dict() if settings is not None else None
        resp = self.client.request("PATCH", "api/v1/me/prefs", json_body=body)
        return Settings.from_dict(resp.json() or {}), resp

    def friends(self) -> tuple[list[Relationship], Response]:
        """Your friends."""
        resp = self.client.request("GET", "prefs/friends")
        return _relationships(_listing_at(resp.json(), 0)), resp

    def blocked(self) -> tuple[list[Relationship], Response]:
        """Your blocked users."""
        resp = self.client.request("GET", "prefs/blocked")
        return _relationships(resp.json()), resp

    def messaging(self) -> tuple[list[Relationship], list[Relationship], Response]:
        """Blocked users and trusted users, respectively."""
        resp = self.client.request("GET", "prefs/messaging")
        payload = resp.json()
        blocked = _relationships(_listing_at(payload, 0))
        trusted = _relationships(_listing_at(payload, 1))
        return blocked, trusted, resp

    def trusted(self) -> tuple[list[Relationship], Response]:
        """Your trusted users."""
        resp = self.client.request("GET", "prefs/trusted")
        return _relationships(resp.json()), resp

    def add_trusted(self, username: str) -> Response:
        """Add a user to your trusted users."""
        return self.client.request(
            "POST", "api/add_whitelisted", form={"api_type": "json", "name": username}
        )

    def remove_trusted(self, username: str) -> Response:
        """Remove a user from your trusted users."""
        return self.client.request(
            "POST", "api/remove_whitelisted", form={"name": username}
        )