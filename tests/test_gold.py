from urllib.parse import parse_qsl

import pytest
import responses

from redditkit.client import Client
from redditkit.gold import GoldService

BASE = "https://api.example.com"


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def gold():
    return GoldService(Client(base_url=BASE))


def _form(call):
    body = call.request.body or ""
    if isinstance(body, bytes):
        body = body.decode()
    return dict(parse_qsl(body, keep_blank_values=True))


def test_gild(mock, gold):
    mock.add(responses.POST, f"{BASE}/api/v1/gold/gild/t1_test")
    resp = gold.gild("t1_test")
    assert resp.status_code == 200
    assert mock.calls[0].request.method == "POST"
    assert _form(mock.calls[0]) == {}


@pytest.mark.parametrize("months", [0, 37])
def test_give_rejects_out_of_range(mock, gold, months):
    with pytest.raises(ValueError, match=r"months: must be between 1 and 36 \(inclusive\)"):
        gold.give("testuser", months)
    assert len(mock.calls) == 0


def test_give(mock, gold):
    mock.add(responses.POST, f"{BASE}/api/v1/gold/give/testuser")
    resp = gold.give("testuser", 1)
    assert resp.status_code == 200
    assert mock.calls[0].request.method == "POST"
    assert _form(mock.calls[0]) == {"months": "1"}