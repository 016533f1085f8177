"""Collections: moderator-curated groups of posts within a subreddit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .client import Client, Response


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


@dataclass
class Collection:
    """A moderator-curated group of posts within a subreddit."""

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
    def from_dict(cls, data: Mapping[str, Any]) -> "Collection":
        return cls(
            id=data.get("collection_id") or "",
            created=_timestamp(data.get("created_at_utc")),
            updated=_timestamp(data.get("last_update_utc")),
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
    """A request to create a collection. ``layout`` is TIMELINE or GALLERY."""

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
    """Collection endpoints of the API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _post(self, path: str, form: Mapping[str, str]) -> Response:
        return self.client.request("POST", f"api/v1/collections/{path}", form=form)

    def get(self, collection_id: str) -> tuple[Collection, Response]:
        """Get a collection by its ID."""
        resp = self.client.request(
            "GET",
            "api/v1/collections/collection",
            params={"collection_id": collection_id, "include_links": "false"},
        )
        return Collection.from_dict(resp.json() or {}), resp

    def from_subreddit(self, subreddit_id: str) -> tuple[list[Collection], Response]:
        """Get all collections in the subreddit, given its full ID."""
        resp = self.client.request(
            "GET",
            "api/v1/collections/subreddit_collections",
            params={"sr_fullname": subreddit_id},
        )
        return [Collection.from_dict(item) for item in resp.json() or []], resp

    def create(self, request: CollectionCreateRequest | None) -> tuple[Collection, Response]:
        """Create a collection and return it."""
        if request is None:
            raise ValueError("CollectionCreateRequest: cannot be None")
        resp = self._post("create_collection", request.to_form())
        return Collection.from_dict(resp.json() or {}), resp

    def delete(self, collection_id: str) -> Response:
        return self._post("delete_collection", {"collection_id": collection_id})

    def add_post(self, post_id: str, collection_id: str) -> Response:
        """Add a post, via its full ID, to a collection."""
        return self._post(
            "add_post_to_collection",
            {"link_fullname": post_id, "collection_id": collection_id},
        )

    def remove_post(self, post_id: str, collection_id: str) -> Response:
        """Remove a post, via its full ID, from a collection."""
        return self._post(
            "remove_post_in_collection",
            {"link_fullname": post_id, "collection_id": collection_id},
        )

    def reorder_posts(self, collection_id: str, *args: str) -> Response:
        """Reorder the posts of a collection into the given order."""
        return self._post(
            "reorder_collection",
            {"collection_id": collection_id, "link_ids": ",".join(args)},
        )

    def update_title(self, collection_id: str, title: str) -> Response:
        return self._post(
            "update_collection_title", {"collection_id": collection_id, "title": title}
        )

    def update_description(self, collection_id: str, description: str) -> Response:
        return self._post(
            "update_collection_description",
            {"collection_id": collection_id, "description": description},
        )

    def _update_layout(self, collection_id: str, layout: str) -> Response:
        return self._post(
            "update_collection_display_layout",
            {"collection_id": collection_id, "display_layout": layout},
        )

    def update_layout_timeline(self, collection_id: str) -> Response:
        return self._update_layout(collection_id, "TIMELINE")

    def update_layout_gallery(self, collection_id: str) -> Response:
        return self._update_layout(collection_id, "GALLERY")

    def _set_follow(self, collection_id: str, follow: bool) -> Response:
        return self._post(
            "follow_collection",
            {"collection_id": collection_id, "follow": "true" if follow else "false"},
        )

    def follow(self, collection_id: str) -> Response:
        return self._set_follow(collection_id, True)

    def unfollow(self, collection_id: str) -> Response:
        return self._set_follow(collection_id, False)