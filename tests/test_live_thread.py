from datetime import datetime, timezone
from urllib.parse import parse_qs, parse_qsl, urlparse

import pytest
import responses

from redditkit.client import Client
from redditkit.live_thread import (
    LiveThread,
    LiveThreadContributor,
    LiveThreadContributors,
    LiveThreadCreateOrUpdateRequest,
    LiveThreadPermissions,
    LiveThreadService,
    LiveThreadUpdate,
    format_permissions,
)

BASE = "https://api.example.com"
UTC = timezone.utc
WS1 = "wss://ws.example.com/live/15nevtv8e54dh?m=placeholder"
WS2 = "wss://ws.example.com/live/15ndkho8e54dh?m=placeholder"


def _thread_data(thread_id, title, created, ws):
    return {
        "id": thread_id,
        "name": f"LiveUpdateEvent_{thread_id}",
        "created_utc": created,
        "title": title,
        "description": title,
        "resources": "",
        "state": "live",
        "viewer_count": 6,
        "viewer_count_fuzzed": True,
        "websocket_url": ws,
        "is_announcement": False,
        "nsfw": False,
    }


LIVE_THREAD_JSON = {
    "kind": "LiveUpdateEvent",
    "data": _thread_data("15nevtv8e54dh", "test", 1600219227.0, WS1),
}

LIVE_THREADS_JSON = {
    "kind": "Listing",
    "data": {
        "after": None,
        "children": [
            LIVE_THREAD_JSON,
            {
                "kind": "LiveUpdateEvent",
                "data": _thread_data("15ndkho8e54dh", "test 2", 1600219237.0, WS2),
            },
        ],
    },
}

UPDATE_2 = {
    "kind": "LiveUpdate",
    "data": {
        "id": "5e46cd94-f968-11ea-9a6a-0e1933241e7d",
        "name": "LiveUpdate_5e46cd94-f968-11ea-9a6a-0e1933241e7d",
        "author": "testuser1",
        "created_utc": 1600403724.0,
        "body": "test 2",
        "embeds": [{"url": "https://example.com"}, {"url": "https://reddit.com"}],
        "stricken": True,
    },
}

UPDATE_1 = {
    "kind": "LiveUpdate",
    "data": {
        "id": "fc44f204-f964-11ea-b148-0e2e56a0425f",
        "name": "LiveUpdate_fc44f204-f964-11ea-b148-0e2e56a0425f",
        "author": "testuser1",
        "created_utc": 1600402271.0,
        "body": "test 1",
        "embeds": [],
        "stricken": True,
    },
}

EXPECTED_LIVE_THREAD = LiveThread(
    id="15nevtv8e54dh",
    full_id="LiveUpdateEvent_15nevtv8e54dh",
    created=datetime(2020, 9, 16, 1, 20, 27, tzinfo=UTC),
    title="test",
    description="test",
    resources="",
    state="live",
    viewer_count=6,
    viewer_count_fuzzed=True,
    websocket_url=WS1,
    announcement=False,
    nsfw=False,
)

EXPECTED_LIVE_THREAD_2 = LiveThread(
    id="15ndkho8e54dh",
    full_id="LiveUpdateEvent_15ndkho8e54dh",
    created=datetime(2020, 9, 16, 1, 20, 37, tzinfo=UTC),
    title="test 2",
    description="test 2",
    state="live",
    viewer_count=6,
    viewer_count_fuzzed=True,
    websocket_url=WS2,
)

EXPECTED_UPDATE_2 = LiveThreadUpdate(
    id="5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    full_id="LiveUpdate_5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    author="testuser1",
    created=datetime(2020, 9, 18, 4, 35, 24, tzinfo=UTC),
    body="test 2",
    embedded_urls=["https://example.com", "https://reddit.com"],
    stricken=True,
)

EXPECTED_UPDATE_1 = LiveThreadUpdate(
    id="fc44f204-f964-11ea-b148-0e2e56a0425f",
    full_id="LiveUpdate_fc44f204-f964-11ea-b148-0e2e56a0425f",
    author="testuser1",
    created=datetime(2020, 9, 18, 4, 11, 11, tzinfo=UTC),
    body="test 1",
    stricken=True,
)


def _contributor_listing(*children):
    return {"kind": "UserList", "data": {"children": list(children)}}


CONTRIBUTOR_1 = {"id": "t2_test1", "name": "test1", "permissions": ["all"]}
CONTRIBUTOR_2 = {"id": "t2_test2", "name": "test2", "permissions": ["all"]}
CONTRIBUTOR_3 = {"id": "t2_test3", "name": "test3", "permissions": ["manage", "discussions"]}

EXPECTED_CURRENT = [
    LiveThreadContributor(id="t2_test1", name="test1", permissions=["all"]),
    LiveThreadContributor(id="t2_test2", name="test2", permissions=["all"]),
]


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def service():
    return LiveThreadService(Client(base_url=BASE))


def _form(call):
    body = call.request.body or ""
    if isinstance(body, bytes):
        body = body.decode()
    return dict(parse_qsl(body, keep_blank_values=True))


def test_get(mock, service):
    mock.add(responses.GET, f"{BASE}/live/id123/about", json=LIVE_THREAD_JSON)
    thread, _ = service.get("id123")
    assert thread == EXPECTED_LIVE_THREAD


def test_now(mock, service):
    mock.add(responses.GET, f"{BASE}/api/live/happening_now", json=LIVE_THREAD_JSON)
    thread, _ = service.now()
    assert thread == EXPECTED_LIVE_THREAD


def test_now_no_content(mock, service):
    mock.add(responses.GET, f"{BASE}/api/live/happening_now", status=204)
    thread, resp = service.now()
    assert thread is None
    assert resp.status_code == 204


def test_get_multiple(mock, service):
    mock.add(responses.GET, f"{BASE}/api/live/by_id/id1,id2", json=LIVE_THREADS_JSON)
    with pytest.raises(ValueError, match="must provide at least 1 id"):
        service.get_multiple()
    threads, _ = service.get_multiple("id1", "id2")
    assert threads == [EXPECTED_LIVE_THREAD, EXPECTED_LIVE_THREAD_2]


def test_update(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/update")
    resp = service.update("id123", "test")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "body": "test"}


def test_updates(mock, service):
    listing = {"kind": "Listing", "data": {"after": "LiveUpdate_x", "children": [UPDATE_2, UPDATE_1]}}
    mock.add(responses.GET, f"{BASE}/live/id123", json=listing)
    updates, resp = service.updates("id123", None)
    assert updates == [EXPECTED_UPDATE_2, EXPECTED_UPDATE_1]
    assert resp.after == "LiveUpdate_x"


def test_updates_sends_options(mock, service):
    listing = {"kind": "Listing", "data": {"children": []}}
    mock.add(responses.GET, f"{BASE}/live/id123", json=listing)
    updates, _ = service.updates("id123", {"limit": 5, "after": None})
    assert updates == []
    query = parse_qs(urlparse(mock.calls[0].request.url).query)
    assert query == {"limit": ["5"]}


def test_update_by_id(mock, service):
    listing = {"kind": "Listing", "data": {"children": [UPDATE_1]}}
    mock.add(responses.GET, f"{BASE}/live/id123/updates/update123", json=listing)
    update, _ = service.update_by_id("id123", "update123")
    assert update == EXPECTED_UPDATE_1


def test_update_by_id_empty_listing(mock, service):
    listing = {"kind": "Listing", "data": {"children": []}}
    mock.add(responses.GET, f"{BASE}/live/id123/updates/missing", json=listing)
    update, _ = service.update_by_id("id123", "missing")
    assert update is None


def test_strike(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/strike_update")
    resp = service.strike("id123", "update123")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "id": "update123"}


def test_delete(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/delete_update")
    resp = service.delete("id123", "update123")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "id": "update123"}


CREATE_FORM = {
    "api_type": "json",
    "title": "testtitle",
    "description": "testdescription",
    "resources": "testresources",
    "nsfw": "true",
}

CREATE_REQUEST = LiveThreadCreateOrUpdateRequest(
    title="testtitle",
    description="testdescription",
    resources="testresources",
    nsfw=True,
)


def test_create(mock, service):
    mock.add(
        responses.POST,
        f"{BASE}/api/live/create",
        json={"json": {"data": {"id": "id123"}, "errors": []}},
    )
    with pytest.raises(ValueError, match="LiveThreadCreateOrUpdateRequest: cannot be None"):
        service.create(None)
    thread_id, _ = service.create(CREATE_REQUEST)
    assert thread_id == "id123"
    assert _form(mock.calls[0]) == CREATE_FORM


def test_close(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/close_thread")
    resp = service.close("id123")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json"}


def test_configure(mock, service):
    mock.add(
        responses.POST,
        f"{BASE}/api/live/id123/edit",
        json={"json": {"data": {"id": "id123"}, "errors": []}},
    )
    with pytest.raises(ValueError, match="LiveThreadCreateOrUpdateRequest: cannot be None"):
        service.configure("id123", None)
    resp = service.configure("id123", CREATE_REQUEST)
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == CREATE_FORM


def test_contributors(mock, service):
    mock.add(
        responses.GET,
        f"{BASE}/live/id123/contributors",
        json=_contributor_listing(CONTRIBUTOR_1, CONTRIBUTOR_2),
    )
    contributors, _ = service.contributors("id123")
    assert contributors == LiveThreadContributors(current=EXPECTED_CURRENT, invited=[])


def test_contributors_and_invited(mock, service):
    mock.add(
        responses.GET,
        f"{BASE}/live/id123/contributors",
        json=[
            _contributor_listing(CONTRIBUTOR_1, CONTRIBUTOR_2),
            _contributor_listing(CONTRIBUTOR_3),
        ],
    )
    contributors, _ = service.contributors("id123")
    assert contributors.current == EXPECTED_CURRENT
    assert contributors.invited == [
        LiveThreadContributor(id="t2_test3", name="test3", permissions=["manage", "discussions"])
    ]


def test_contributors_from_json_rejects_other_values():
    with pytest.raises(TypeError):
        LiveThreadContributors.from_json("not a listing")
    with pytest.raises(ValueError):
        LiveThreadContributors.from_json(None)


def test_accept(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/accept_contributor_invite")
    resp = service.accept("id123")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json"}


def test_leave(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/leave_contributor")
    resp = service.leave("id123")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json"}


def test_invite(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/invite_contributor")
    resp = service.invite("id123", "testuser", None)
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {
        "api_type": "json",
        "name": "testuser",
        "type": "liveupdate_contributor_invite",
        "permissions": "+all",
    }


def test_invite_permissions(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/invite_contributor")
    resp = service.invite(
        "id123",
        "testuser",
        LiveThreadPermissions(close=True, manage=True, update=True),
    )
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {
        "api_type": "json",
        "name": "testuser",
        "type": "liveupdate_contributor_invite",
        "permissions": "-all,+close,-discussions,-edit,+manage,-settings,+update",
    }


def test_uninvite(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/rm_contributor_invite")
    resp = service.uninvite("id123", "t2_test")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "id": "t2_test"}


def test_set_permissions(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/set_contributor_permissions")
    resp = service.set_permissions(
        "id123",
        "testuser",
        LiveThreadPermissions(discussions=True, edit=True, settings=True),
    )
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {
        "api_type": "json",
        "name": "testuser",
        "type": "liveupdate_contributor",
        "permissions": "-all,-close,+discussions,+edit,-manage,+settings,-update",
    }


def test_set_permissions_for_invite(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/set_contributor_permissions")
    resp = service.set_permissions_for_invite(
        "id123",
        "testuser",
        LiveThreadPermissions(discussions=True, edit=True, settings=True),
    )
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {
        "api_type": "json",
        "name": "testuser",
        "type": "liveupdate_contributor_invite",
        "permissions": "-all,-close,+discussions,+edit,-manage,+settings,-update",
    }


def test_revoke(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/rm_contributor")
    resp = service.revoke("id123", "t2_test")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "id": "t2_test"}


def test_hide_discussion(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/hide_discussion")
    resp = service.hide_discussion("id123", "t3_test")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "link": "t3_test"}


def test_unhide_discussion(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/unhide_discussion")
    resp = service.unhide_discussion("id123", "t3_test")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "link": "t3_test"}


def test_report(mock, service):
    mock.add(responses.POST, f"{BASE}/api/live/id123/report")
    with pytest.raises(
        ValueError, match="invalid reason for reporting live thread: invalidreason"
    ):
        service.report("id123", "invalidreason")
    assert len(mock.calls) == 0
    resp = service.report("id123", "spam")
    assert resp.status_code == 200
    assert _form(mock.calls[0]) == {"api_type": "json", "type": "spam"}


def test_format_permissions():
    assert format_permissions(None) == "+all"
    assert format_permissions(LiveThreadPermissions(all=True)) == (
        "+all,-close,-discussions,-edit,-manage,-settings,-update"
    )
    assert str(LiveThreadPermissions(update=True)).endswith("+update")


def test_request_to_form_leaves_out_unset_values():
    assert LiveThreadCreateOrUpdateRequest().to_form() == {}
    assert LiveThreadCreateOrUpdateRequest(title="t", nsfw=False).to_form() == {
        "title": "t",
        "nsfw": "false",
    }


def test_update_from_dict_without_embeds():
    update = LiveThreadUpdate.from_dict({"id": "x", "body": "b"})
    assert update.embedded_urls == []
    assert update.created is None
    assert update.body == "b"