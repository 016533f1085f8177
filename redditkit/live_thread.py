"""Live threads: threads that provide real-time updates."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Mapping

from .client import Client, Response

_KIND_LIVE_THREAD = "LiveUpdateEvent"
_KIND_LIVE_THREAD_UPDATE = "LiveUpdate"

REPORT_REASONS = frozenset(
    {
        "spam",
        "vote-manipulation",
        "personal-information",
        "sexualizing-minors",
        "site-breaking",
    }
)


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


def _bool(value: bool) -> str:
    return "true" if value else "false"


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
    # Empty when a live thread has ended.
    websocket_url: str = ""
    announcement: bool = False
    nsfw: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LiveThread":
        return cls(
            id=data.get("id") or "",
            full_id=data.get("name") or "",
            created=_timestamp(data.get("created_utc")),
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
    def from_dict(cls, data: Mapping[str, Any]) -> "LiveThreadUpdate":
        return cls(
            id=data.get("id") or "",
            full_id=data.get("name") or "",
            author=data.get("author") or "",
            created=_timestamp(data.get("created_utc")),
            body=data.get("body") or "",
            embedded_urls=[embed.get("url") or "" for embed in data.get("embeds") or []],
            stricken=bool(data.get("stricken")),
        )


@dataclass
class LiveThreadCreateOrUpdateRequest:
    """A request to create or configure a live thread. Unset values are not sent."""

    # No longer than 120 characters.
    title: str = ""
    description: str = ""
    resources: str = ""
    nsfw: bool | None = None

    def to_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
        if self.title:
            form["title"] = self.title
        if self.description:
            form["description"] = self.description
        if self.resources:
            form["resources"] = self.resources
        if self.nsfw is not None:
            form["nsfw"] = _bool(self.nsfw)
        return form


@dataclass
class LiveThreadContributor:
    """A user that can contribute to a live thread."""

    id: str = ""
    name: str = ""
    permissions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LiveThreadContributor":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            permissions=list(data.get("permissions") or []),
        )


def _contributors(listing: Any) -> list[LiveThreadContributor]:
    if not isinstance(listing, Mapping):
        return []
    data = listing.get("data") or {}
    return [LiveThreadContributor.from_dict(item) for item in data.get("children") or []]


@dataclass
class LiveThreadContributors:
    """Current contributors, and invited ones if you may manage contributors."""

    current: list[LiveThreadContributor] = field(default_factory=list)
    invited: list[LiveThreadContributor] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "LiveThreadContributors":
        """Read either a single listing or a pair of listings (current, invited)."""
        if data is None:
            raise ValueError("no contributors data to read")
        if isinstance(data, Mapping):
            return cls(current=_contributors(data))
        if isinstance(data, (list, tuple)):
            current = _contributors(data[0]) if len(data) > 0 else []
            invited = _contributors(data[1]) if len(data) > 1 else []
            return cls(current=current, invited=invited)
        raise TypeError("contributors must be a listing or a list of listings")


@dataclass
class LiveThreadPermissions:
    """Permissions a contributor has or lacks in a live thread."""

    all: bool = False
    close: bool = False
    discussions: bool = False
    edit: bool = False
    manage: bool = False
    settings: bool = False
    # Posting updates to the thread.
    update: bool = False

    def __str__(self) -> str:
        return format_permissions(self)


def format_permissions(permissions: LiveThreadPermissions | None) -> str:
    """The permissions in the API's ``+name,-name`` form; None grants everything."""
    if permissions is None:
        return "+all"
    return ",".join(
        f"{'+' if getattr(permissions, f.name) else '-'}{f.name}"
        for f in fields(permissions)
    )


def _thing_data(payload: Any, kind: str) -> Mapping[str, Any] | None:
    if isinstance(payload, Mapping) and payload.get("kind") == kind:
        data = payload.get("data")
        return data if isinstance(data, Mapping) else {}
    return None


def _listing_children(resp: Response, kind: str) -> list[Mapping[str, Any]]:
    payload = resp.json()
    data = payload.get("data") if isinstance(payload, Mapping) else None
    if not isinstance(data, Mapping):
        return []
    resp.after = data.get("after") or ""
    return [
        child.get("data") or {}
        for child in data.get("children") or []
        if isinstance(child, Mapping) and child.get("kind") == kind
    ]


def _require(request: Any, name: str) -> None:
    if request is None:
        raise ValueError(f"{name}: cannot be None")


class LiveThreadService:
    """Live thread endpoints of the API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _post(self, path: str, **values: str) -> Response:
        form = {"api_type": "json", **values}
        return self.client.request("POST", path, form=form)

    def now(self) -> tuple[LiveThread | None, Response]:
        """The currently featured live thread, or None if none is featured."""
        resp = self.client.request("GET", "api/live/happening_now")
        if resp.status_code == 204:
            return None, resp
        data = _thing_data(resp.json(), _KIND_LIVE_THREAD)
        return (LiveThread.from_dict(data) if data is not None else None), resp

    def get(self, thread_id: str) -> tuple[LiveThread | None, Response]:
        """Information about a live thread."""
        resp = self.client.request("GET", f"live/{thread_id}/about")
        data = _thing_data(resp.json(), _KIND_LIVE_THREAD)
        return (LiveThread.from_dict(data) if data is not None else None), resp

    def get_multiple(self, *args: str) -> tuple[list[LiveThread], Response]:
        """Information about several live threads."""
        if not args:
            raise ValueError("must provide at least 1 id")
        resp = self.client.request("GET", f"api/live/by_id/{','.join(args)}")
        children = _listing_children(resp, _KIND_LIVE_THREAD)
        return [LiveThread.from_dict(item) for item in children], resp

    def update(self, thread_id: str, text: str) -> Response:
        """Post an update to the live thread. Requires the "update" permission."""
        return self._post(f"api/live/{thread_id}/update", body=text)

    def updates(
        self, thread_id: str, options: Mapping[str, Any] | None = None
    ) -> tuple[list[LiveThreadUpdate], Response]:
        """Updates posted in the live thread; ``options`` are listing parameters."""
        params = (
            {key: value for key, value in options.items() if value not in (None, "")}
            if options
            else None
        )
        resp = self.client.request("GET", f"live/{thread_id}", params=params or None)
        children = _listing_children(resp, _KIND_LIVE_THREAD_UPDATE)
        return [LiveThreadUpdate.from_dict(item) for item in children], resp

    def update_by_id(
        self, thread_id: str, update_id: str
    ) -> tuple[LiveThreadUpdate | None, Response]:
        """A single update of the live thread, via its short id."""
        resp = self.client.request("GET", f"live/{thread_id}/updates/{update_id}")
        children = _listing_children(resp, _KIND_LIVE_THREAD_UPDATE)
        update = LiveThreadUpdate.from_dict(children[0]) if children else None
        return update, resp

    def strike(self, thread_id: str, update_id: str) -> Response:
        """Mark an update as incorrect and cross it out."""
        return self._post(f"api/live/{thread_id}/strike_update", id=update_id)

    def delete(self, thread_id: str, update_id: str) -> Response:
        """Delete an update from the live thread."""
        return self._post(f"api/live/{thread_id}/delete_update", id=update_id)

    def create(
        self, request: LiveThreadCreateOrUpdateRequest | None
    ) -> tuple[str, Response]:
        """Create a live thread and return its id."""
        _require(request, "LiveThreadCreateOrUpdateRequest")
        resp = self._post("api/live/create", **request.to_form())
        payload = resp.json() or {}
        inner = payload.get("json") or {} if isinstance(payload, Mapping) else {}
        data = inner.get("data") or {}
        return data.get("id") or "", resp

    def close(self, thread_id: str) -> Response:
        """Close the thread permanently, disallowing future updates."""
        return self._post(f"api/live/{thread_id}/close_thread")

    def configure(
        self, thread_id: str, request: LiveThreadCreateOrUpdateRequest | None
    ) -> Response:
        """Configure the thread. Requires the "settings" permission."""
        _require(request, "LiveThreadCreateOrUpdateRequest")
        return self._post(f"api/live/{thread_id}/edit", **request.to_form())

    def contributors(self, thread_id: str) -> tuple[LiveThreadContributors, Response]:
        """Contributors of the live thread, and invited ones if you may manage them."""
        resp = self.client.request("GET", f"live/{thread_id}/contributors")
        return LiveThreadContributors.from_json(resp.json()), resp

    def accept(self, thread_id: str) -> Response:
        """Accept a pending invite to contribute to the live thread."""
        return self._post(f"api/live/{thread_id}/accept_contributor_invite")

    def leave(self, thread_id: str) -> Response:
        """Give up your status as contributor of the live thread."""
        return self._post(f"api/live/{thread_id}/leave_contributor")

    def invite(
        self,
        thread_id: str,
        username: str,
        permissions: LiveThreadPermissions | None = None,
    ) -> Response:
        """Invite a user to contribute; None grants all permissions."""
        return self._post(
            f"api/live/{thread_id}/invite_contributor",
            name=username,
            type="liveupdate_contributor_invite",
            permissions=format_permissions(permissions),
        )

    def uninvite(self, thread_id: str, user_id: str) -> Response:
        """Withdraw an invite, via the user's full ID."""
        return self._post(f"api/live/{thread_id}/rm_contributor_invite", id=user_id)

    def set_permissions(
        self,
        thread_id: str,
        username: str,
        permissions: LiveThreadPermissions | None = None,
    ) -> Response:
        """Set a contributor's permissions; None grants all permissions."""
        return self._post(
            f"api/live/{thread_id}/set_contributor_permissions",
            name=username,
            type="liveupdate_contributor",
            permissions=format_permissions(permissions),
        )

    def set_permissions_for_invite(
        self,
        thread_id: str,
        username: str,
        permissions: LiveThreadPermissions | None = None,
    ) -> Response:
        """Set the permissions of a pending invite; None grants all permissions."""
        return self._post(
            f"api/live/{thread_id}/set_contributor_permissions",
            name=username,
            type="liveupdate_contributor_invite",
            permissions=format_permissions(permissions),
        )

    def revoke(self, thread_id: str, user_id: str) -> Response:
        """Revoke a user's contributorship, via their full ID."""
        return self._post(f"api/live/{thread_id}/rm_contributor", id=user_id)

    def hide_discussion(self, thread_id: str, post_id: str) -> Response:
        """Hide a linked post from the discussion sidebar."""
        return self._post(f"api/live/{thread_id}/hide_discussion", link=post_id)

    def unhide_discussion(self, thread_id: str, post_id: str) -> Response:
        """Show a hidden linked post in the discussion sidebar again."""
        return self._post(f"api/live/{thread_id}/unhide_discussion", link=post_id)

    def report(self, thread_id: str, reason: str) -> Response:
        """Report the live thread for one of the accepted reasons."""
        if reason not in REPORT_REASONS:
            raise ValueError(f"invalid reason for reporting live thread: {reason}")
        return self._post(f"api/live/{thread_id}/report", type=reason)