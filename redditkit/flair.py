"""Flair endpoints: tags attached to users and posts within a subreddit."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .client import Client, Response


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _put(form: dict[str, str], key: str, value: Any) -> None:
    """Add ``value`` to ``form`` unless it is unset (None or an empty string)."""
    if value is None:
        return
    if isinstance(value, bool):
        form[key] = _bool(value)
    elif isinstance(value, int):
        form[key] = str(value)
    elif value != "":
        form[key] = str(value)


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
    def from_dict(cls, data: Mapping[str, Any]) -> "Flair":
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
    """A condensed flair: the user, the text and the CSS class."""

    user: str = ""
    text: str = ""
    css_class: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlairSummary":
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
    def from_dict(cls, data: Mapping[str, Any]) -> "FlairChoice":
        return cls(
            template_id=data.get("flair_template_id") or "",
            text=data.get("flair_text") or "",
            editable=bool(data.get("flair_text_editable")),
            position=data.get("flair_position") or "",
            css_class=data.get("flair_css_class") or "",
        )


@dataclass
class FlairConfigureRequest:
    """Flair settings of a subreddit. Unset values are not sent."""

    user_flair_enabled: bool | None = None
    user_flair_position: str = ""
    user_flair_self_assign_enabled: bool | None = None
    post_flair_position: str = ""
    post_flair_self_assign_enabled: bool | None = None

    def to_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
        _put(form, "flair_enabled", self.user_flair_enabled)
        _put(form, "flair_position", self.user_flair_position)
        _put(form, "flair_self_assign_enabled", self.user_flair_self_assign_enabled)
        _put(form, "link_flair_position", self.post_flair_position)
        _put(form, "link_flair_self_assign_enabled", self.post_flair_self_assign_enabled)
        return form


@dataclass
class FlairTemplateCreateOrUpdateRequest:
    """A request to create a flair template, or update it when ``id`` is valid."""

    id: str = ""
    allowable_content: str = ""
    text: str = ""
    text_color: str = ""
    text_editable: bool | None = None
    mod_only: bool | None = None
    max_emojis: int | None = None
    background_color: str = ""
    css_class: str = ""

    def to_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
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
    def from_dict(cls, data: Mapping[str, Any]) -> "FlairTemplate":
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

    def to_form(self) -> dict[str, str]:
        form: dict[str, str] = {}
        _put(form, "flair_template_id", self.id)
        _put(form, "text", self.text)
        return form


@dataclass
class FlairChangeRequest:
    """A change of a user's flair; empty text and CSS class clear it."""

    user: str
    text: str = ""
    css_class: str = ""


@dataclass
class FlairChangeResponse:
    """The outcome of a single FlairChangeRequest."""

    ok: bool = False
    status: str = ""
    warnings: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlairChangeResponse":
        return cls(
            ok=bool(data.get("ok")),
            status=data.get("status") or "",
            warnings=dict(data.get("warnings") or {}),
            errors=dict(data.get("errors") or {}),
        )


def _require(request: Any, name: str) -> None:
    if request is None:
        raise ValueError(f"{name}: cannot be None")


class FlairService:
    """Flair endpoints of the API."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def _get_flairs(self, path: str) -> tuple[list[Flair], Response]:
        resp = self.client.request("GET", path)
        return [Flair.from_dict(item) for item in resp.json() or []], resp

    def get_user_flairs(self, subreddit: str) -> tuple[list[Flair], Response]:
        """The user flairs of the subreddit."""
        return self._get_flairs(f"r/{subreddit}/api/user_flair_v2")

    def get_post_flairs(self, subreddit: str) -> tuple[list[Flair], Response]:
        """The post flairs of the subreddit."""
        return self._get_flairs(f"r/{subreddit}/api/link_flair_v2")

    def list_user_flairs(self, subreddit: str) -> tuple[list[FlairSummary], Response]:
        """The flairs of individual users in the subreddit."""
        resp = self.client.request("GET", f"r/{subreddit}/api/flairlist")
        payload = resp.json() or {}
        users = payload.get("users") or [] if isinstance(payload, Mapping) else []
        return [FlairSummary.from_dict(item) for item in users], resp

    def configure(
        self, subreddit: str, request: FlairConfigureRequest | None
    ) -> Response:
        """Configure the subreddit's flair settings."""
        _require(request, "FlairConfigureRequest")
        form = request.to_form()
        form["api_type"] = "json"
        return self.client.request("POST", f"r/{subreddit}/api/flairconfig", form=form)

    def _set_enabled(self, subreddit: str, enabled: bool) -> Response:
        return self.client.request(
            "POST",
            f"r/{subreddit}/api/setflairenabled",
            form={"api_type": "json", "flair_enabled": _bool(enabled)},
        )

    def enable(self, subreddit: str) -> Response:
        """Enable your flair in the subreddit."""
        return self._set_enabled(subreddit, True)

    def disable(self, subreddit: str) -> Response:
        """Disable your flair in the subreddit."""
        return self._set_enabled(subreddit, False)

    def _upsert_template(
        self,
        subreddit: str,
        request: FlairTemplateCreateOrUpdateRequest | None,
        flair_type: str,
    ) -> tuple[FlairTemplate, Response]:
        _require(request, "FlairTemplateCreateOrUpdateRequest")
        form = request.to_form()
        form["api_type"] = "json"
        form["flair_type"] = flair_type
        resp = self.client.request(
            "POST", f"r/{subreddit}/api/flairtemplate_v2", form=form
        )
        return FlairTemplate.from_dict(resp.json() or {}), resp

    def upsert_user_template(
        self, subreddit: str, request: FlairTemplateCreateOrUpdateRequest | None
    ) -> tuple[FlairTemplate, Response]:
        """Create a user flair template, or update it if ``request.id`` is valid."""
        return self._upsert_template(subreddit, request, "USER_FLAIR")

    def upsert_post_template(
        self, subreddit: str, request: FlairTemplateCreateOrUpdateRequest | None
    ) -> tuple[FlairTemplate, Response]:
        """Create a post flair template, or update it if ``request.id`` is valid."""
        return self._upsert_template(subreddit, request, "LINK_FLAIR")

    def delete(self, subreddit: str, username: str) -> Response:
        """Delete the flair of the user."""
        return self.client.request(
            "POST",
            f"r/{subreddit}/api/deleteflair",
            form={"api_type": "json", "name": username},
        )

    def delete_template(self, subreddit: str, template_id: str) -> Response:
        """Delete a flair template via its id."""
        return self.client.request(
            "POST",
            f"r/{subreddit}/api/deleteflairtemplate",
            form={"api_type": "json", "flair_template_id": template_id},
        )

    def _clear_templates(self, subreddit: str, flair_type: str) -> Response:
        return self.client.request(
            "POST",
            f"r/{subreddit}/api/clearflairtemplates",
            form={"api_type": "json", "flair_type": flair_type},
        )

    def delete_all_user_templates(self, subreddit: str) -> Response:
        return self._clear_templates(subreddit, "USER_FLAIR")

    def delete_all_post_templates(self, subreddit: str) -> Response:
        return self._clear_templates(subreddit, "LINK_FLAIR")

    def _reorder(self, subreddit: str, flair_type: str, ids: Sequence[str]) -> Response:
        return self.client.request(
            "PATCH",
            f"api/v1/{subreddit}/flair_template_order/{flair_type}",
            json_body=list(ids),
        )

    def reorder_user_templates(self, subreddit: str, ids: Sequence[str]) -> Response:
        """Reorder the user flair templates; every id must be given."""
        return self._reorder(subreddit, "USER_FLAIR", ids)

    def reorder_post_templates(self, subreddit: str, ids: Sequence[str]) -> Response:
        """Reorder the post flair templates; every id must be given."""
        return self._reorder(subreddit, "LINK_FLAIR", ids)

    def _choices(
        self, path: str, form: Mapping[str, str]
    ) -> tuple[list[FlairChoice], FlairChoice | None, Response]:
        resp = self.client.request("POST", path, form=form)
        payload = resp.json() or {}
        choices = [FlairChoice.from_dict(item) for item in payload.get("choices") or []]
        current_data = payload.get("current")
        current = FlairChoice.from_dict(current_data) if current_data else None
        return choices, current, resp

    def choices(
        self, subreddit: str
    ) -> tuple[list[FlairChoice], FlairChoice | None, Response]:
        """Flairs you can assign to yourself in the subreddit, and your current one."""
        return self.choices_of(subreddit, self.client.username)

    def choices_of(
        self, subreddit: str, username: str
    ) -> tuple[list[FlairChoice], FlairChoice | None, Response]:
        """Flairs the user can assign to themself in the subreddit, and their current one."""
        return self._choices(f"r/{subreddit}/api/flairselector", {"name": username})

    def choices_for_post(
        self, post_id: str
    ) -> tuple[list[FlairChoice], FlairChoice | None, Response]:
        """Flairs you can assign to an existing post, and its current one."""
        return self._choices("api/flairselector", {"link": post_id})

    def choices_for_new_post(
        self, subreddit: str
    ) -> tuple[list[FlairChoice], Response]:
        """Flairs you can assign to a new post in the subreddit."""
        choices, _, resp = self._choices(
            f"r/{subreddit}/api/flairselector", {"is_newlink": "true"}
        )
        return choices, resp

    def select(self, subreddit: str, request: FlairSelectRequest | None) -> Response:
        """Select a flair to display next to your username in the subreddit."""
        return self.assign(subreddit, self.client.username, request)

    def assign(
        self, subreddit: str, user: str, request: FlairSelectRequest | None
    ) -> Response:
        """Assign a flair to a user in the subreddit."""
        _require(request, "FlairSelectRequest")
        form = request.to_form()
        form["api_type"] = "json"
        form["name"] = user
        return self.client.request("POST", f"r/{subreddit}/api/selectflair", form=form)

    def select_for_post(
        self, post_id: str, request: FlairSelectRequest | None
    ) -> Response:
        """Assign a flair to the post."""
        _require(request, "FlairSelectRequest")
        form = request.to_form()
        form["api_type"] = "json"
        form["link"] = post_id
        return self.client.request("POST", "api/selectflair", form=form)

    def remove_from_post(self, post_id: str) -> Response:
        """Remove the flair from the post."""
        return self.client.request(
            "POST", "api/selectflair", form={"api_type": "json", "link": post_id}
        )

    def change(
        self, subreddit: str, requests: Sequence[FlairChangeRequest] | None
    ) -> tuple[list[FlairChangeResponse], Response]:
        """Change the flair of between 1 and 100 users at once."""
        changes = list(requests or [])
        if not 1 <= len(changes) <= 100:
            raise ValueError("requests: must provide between 1 and 100")

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerows([change.user, change.text, change.css_class] for change in changes)

        resp = self.client.request(
            "POST",
            f"r/{subreddit}/api/flaircsv",
            form={"flair_csv": buffer.getvalue()},
        )
        return [FlairChangeResponse.from_dict(item) for item in resp.json() or []], resp