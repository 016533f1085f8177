"""Emoji endpoints: graphics that can be included in user and post flairs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .client import Client, Response, check_response

_KIND_SUBREDDIT = "t5"


def _bool(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class Emoji:
    """A graphic element that can be included in a post flair or user flair."""

    name: str = ""
    url: str = ""
    user_flair_allowed: bool = False
    post_flair_allowed: bool = False
    mod_flair_only: bool = False
    # Full ID of the user who created this emoji.
    created_by: str = ""

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "Emoji":
        return cls(
            name=name,
            url=data.get("url") or "",
            user_flair_allowed=bool(data.get("user_flair_allowed")),
            post_flair_allowed=bool(data.get("post_flair_allowed")),
            mod_flair_only=bool(data.get("mod_flair_only")),
            created_by=data.get("created_by") or "",
        )


def _emojis(data: Any) -> list[Emoji]:
    if not isinstance(data, Mapping):
        return []
    return [Emoji.from_dict(name, value or {}) for name, value in data.items()]


@dataclass
class EmojiCreateOrUpdateRequest:
    """A request to create or update an emoji. Unset permissions are not sent."""

    name: str = ""
    user_flair_allowed: bool | None = None
    post_flair_allowed: bool | None = None
    mod_flair_only: bool | None = None

    def validate(self) -> None:
        """Raise ValueError if the request cannot be sent."""
        if not self.name:
            raise ValueError("EmojiCreateOrUpdateRequest.name: cannot be empty")

    def to_form(self) -> dict[str, str]:
        form = {"name": self.name}
        for key in ("user_flair_allowed", "post_flair_allowed", "mod_flair_only"):
            value = getattr(self, key)
            if value is not None:
                form[key] = _bool(value)
        return form


def _validated(request: EmojiCreateOrUpdateRequest | None) -> EmojiCreateOrUpdateRequest:
    if request is None:
        raise ValueError("EmojiCreateOrUpdateRequest: cannot be None")
    request.validate()
    return request


class EmojiService:
    """Emoji endpoints of the API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def get(self, subreddit: str) -> tuple[list[Emoji], list[Emoji], Response]:
        """The default set of emojis and those of the subreddit, respectively."""
        resp = self.client.request("GET", f"api/v1/{subreddit}/emojis/all")
        payload = resp.json() or {}
        if not isinstance(payload, Mapping):
            payload = {}
        default_emojis = _emojis(payload.get("snoomojis"))
        subreddit_emojis = next(
            (
                _emojis(value)
                for key, value in payload.items()
                if key.startswith(_KIND_SUBREDDIT)
            ),
            [],
        )
        return default_emojis, subreddit_emojis, resp

    def delete(self, subreddit: str, emoji: str) -> Response:
        """Delete the emoji from the subreddit."""
        return self.client.request("DELETE", f"api/v1/{subreddit}/emoji/{emoji}")

    def set_size(self, subreddit: str, height: int, width: int) -> Response:
        """Set the custom emoji size; both must be between 1 and 40 (inclusive)."""
        return self.client.request(
            "POST",
            f"api/v1/{subreddit}/emoji_custom_size",
            form={"height": str(height), "width": str(width)},
        )

    def disable_custom_size(self, subreddit: str) -> Response:
        """Disable the custom emoji size in the subreddit."""
        return self.client.request("POST", f"api/v1/{subreddit}/emoji_custom_size")

    def _lease(self, subreddit: str, image_path: str) -> tuple[str, dict[str, str]]:
        mimetype = "image/png" if image_path.lower().endswith(".png") else "image/jpeg"
        resp = self.client.request(
            "POST",
            f"api/v1/{subreddit}/emoji_asset_upload_s3.json",
            form={"filepath": image_path, "mimetype": mimetype},
        )
        payload = resp.json() or {}
        lease = payload.get("s3UploadLease") or {} if isinstance(payload, Mapping) else {}
        upload_url = f"http:{lease.get('action') or ''}"
        fields = {
            item.get("name") or "": item.get("value") or ""
            for item in lease.get("fields") or []
        }
        return upload_url, fields

    def upload(
        self,
        subreddit: str,
        request: EmojiCreateOrUpdateRequest | None,
        image_path: str | os.PathLike[str],
    ) -> Response:
        """Upload an image file as an emoji of the subreddit."""
        request = _validated(request)
        path = os.fspath(image_path)
        upload_url, fields = self._lease(subreddit, path)

        # The storage service ignores fields sent after the file, so the
        # lease fields go first; requests encodes data before files.
        with open(path, "rb") as image:
            http_response = self.client.session.post(
                upload_url,
                data=fields,
                files={"file": (path, image)},
                timeout=self.client.timeout,
            )
        check_response(http_response)

        form = request.to_form()
        form["s3_key"] = fields.get("key", "")
        return self.client.request("POST", f"api/v1/{subreddit}/emoji.json", form=form)

    def update(
        self, subreddit: str, request: EmojiCreateOrUpdateRequest | None
    ) -> Response:
        """Update the permissions of an emoji of the subreddit."""
        request = _validated(request)
        return self.client.request(
            "POST", f"api/v1/{subreddit}/emoji_permissions", form=request.to_form()
        )