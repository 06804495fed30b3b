from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlsplit

import pytest
import responses

from redditwrap.live_thread import (
    LiveThread,
    LiveThreadContributor,
    LiveThreadContributors,
    LiveThreadCreateOrUpdateRequest,
    LiveThreadPermissions,
    LiveThreadService,
    LiveThreadUpdate,
    permissions_string,
)
from redditwrap.transport import Transport

BASE = "https://oauth.reddit.com/"
WS1 = "wss://ws.example.com/live/15nevtv8e54dh?m=placeholder"
WS2 = "wss://ws.example.com/live/15ndkho8e54dh?m=placeholder"


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def thread_json(id, title, created, ws):
    return {
        "id": id,
        "name": f"LiveUpdateEvent_{id}",
        "created_utc": created.timestamp(),
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


THREAD_1 = thread_json("15nevtv8e54dh", "test", utc(2020, 9, 16, 1, 20, 27), WS1)
THREAD_2 = thread_json("15ndkho8e54dh", "test 2", utc(2020, 9, 16, 1, 20, 37), WS2)

EXPECTED_THREAD = LiveThread(
    id="15nevtv8e54dh",
    full_id="LiveUpdateEvent_15nevtv8e54dh",
    created=utc(2020, 9, 16, 1, 20, 27),
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

EXPECTED_THREAD_2 = LiveThread(
    id="15ndkho8e54dh",
    full_id="LiveUpdateEvent_15ndkho8e54dh",
    created=utc(2020, 9, 16, 1, 20, 37),
    title="test 2",
    description="test 2",
    state="live",
    viewer_count=6,
    viewer_count_fuzzed=True,
    websocket_url=WS2,
)

UPDATE_1 = {
    "id": "5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    "name": "LiveUpdate_5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    "author": "testuser1",
    "created_utc": utc(2020, 9, 18, 4, 35, 24).timestamp(),
    "body": "test 2",
    "embeds": [{"url": "https://example.com"}, {"url": "https://reddit.com"}],
    "stricken": True,
}
UPDATE_2 = {
    "id": "fc44f204-f964-11ea-b148-0e2e56a0425f",
    "name": "LiveUpdate_fc44f204-f964-11ea-b148-0e2e56a0425f",
    "author": "testuser1",
    "created_utc": utc(2020, 9, 18, 4, 11, 11).timestamp(),
    "body": "test 1",
    "embeds": [],
    "stricken": True,
}

EXPECTED_UPDATE_1 = LiveThreadUpdate(
    id="5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    full_id="LiveUpdate_5e46cd94-f968-11ea-9a6a-0e1933241e7d",
    author="testuser1",
    created=utc(2020, 9, 18, 4, 35, 24),
    body="test 2",
    embedded_urls=["https://example.com", "https://reddit.com"],
    stricken=True,
)
EXPECTED_UPDATE_2 = LiveThreadUpdate(
    id="fc44f204-f964-11ea-b148-0e2e56a0425f",
    full_id="LiveUpdate_fc44f204-f964-11ea-b148-0e2e56a0425f",
    author="testuser1",
    created=utc(2020, 9, 18, 4, 11, 11),
    body="test 1",
    stricken=True,
)


def listing(kind, items):
    return {
        "kind": "Listing",
        "data": {"children": [{"kind": kind, "data": item} for item in items], "after": None},
    }


def contributor_listing(items):
    return {"kind": "UserList", "data": {"children": items}}


CURRENT = [
    {"id": "t2_test1", "name": "test1", "permissions": ["all"]},
    {"id": "t2_test2", "name": "test2", "permissions": ["all"]},
]
INVITED = [{"id": "t2_test3", "name": "test3", "permissions": ["manage", "discussions"]}]


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def service():
    return LiveThreadService(Transport(BASE, username="user1"))


def sent_form(mocked, index=-1):
    body = mocked.calls[index].request.body or ""
    if isinstance(body, bytes):
        body = body.decode()
    return dict(parse_qsl(body, keep_blank_values=True))


def test_get(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123/about",
               json={"kind": "LiveUpdateEvent", "data": THREAD_1})
    assert service.get("id123") == EXPECTED_THREAD


def test_now(mocked, service):
    mocked.add(responses.GET, BASE + "api/live/happening_now",
               json={"kind": "LiveUpdateEvent", "data": THREAD_1})
    assert service.now() == EXPECTED_THREAD


def test_now_no_content(mocked, service):
    mocked.add(responses.GET, BASE + "api/live/happening_now", status=204)
    assert service.now() is None


def test_get_multiple(mocked, service):
    with pytest.raises(ValueError, match="must provide at least 1 id"):
        service.get_multiple()
    mocked.add(responses.GET, BASE + "api/live/by_id/id1,id2",
               json=listing("LiveUpdateEvent", [THREAD_1, THREAD_2]))
    assert service.get_multiple("id1", "id2") == [EXPECTED_THREAD, EXPECTED_THREAD_2]


def test_update(mocked, service):
    mocked.add(responses.POST, BASE + "api/live/id123/update")
    response = service.update("id123", "test")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json", "body": "test"}


def test_updates(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123",
               json=listing("LiveUpdate", [UPDATE_1, UPDATE_2]))
    assert service.updates("id123", None) == [EXPECTED_UPDATE_1, EXPECTED_UPDATE_2]


def test_updates_sends_options(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123", json=listing("LiveUpdate", []))
    assert service.updates("id123", {"limit": 5, "after": "LiveUpdate_x"}) == []
    query = dict(parse_qsl(urlsplit(mocked.calls[0].request.url).query))
    assert query == {"limit": "5", "after": "LiveUpdate_x"}


def test_update_by_id(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123/updates/update123",
               json=listing("LiveUpdate", [UPDATE_2]))
    assert service.update_by_id("id123", "update123") == EXPECTED_UPDATE_2


def test_update_by_id_missing(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123/updates/update123",
               json=listing("LiveUpdate", []))
    assert service.update_by_id("id123", "update123") is None


@pytest.mark.parametrize(
    "method, endpoint",
    [("strike", "strike_update"), ("delete", "delete_update")],
)
def test_strike_and_delete(mocked, service, method, endpoint):
    mocked.add(responses.POST, BASE + f"api/live/id123/{endpoint}")
    response = getattr(service, method)("id123", "update123")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json", "id": "update123"}


def test_create(mocked, service):
    with pytest.raises(ValueError):
        service.create(None)
    mocked.add(responses.POST, BASE + "api/live/create",
               json={"json": {"data": {"id": "id123"}, "errors": []}})
    thread_id = service.create(LiveThreadCreateOrUpdateRequest(
        title="testtitle", description="testdescription",
        resources="testresources", nsfw=True,
    ))
    assert thread_id == "id123"
    assert sent_form(mocked) == {
        "api_type": "json", "title": "testtitle", "description": "testdescription",
        "resources": "testresources", "nsfw": "true",
    }


def test_close(mocked, service):
    mocked.add(responses.POST, BASE + "api/live/id123/close_thread")
    response = service.close("id123")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json"}


def test_configure(mocked, service):
    with pytest.raises(ValueError):
        service.configure("id123", None)
    mocked.add(responses.POST, BASE + "api/live/id123/edit",
               json={"json": {"data": {"id": "id123"}, "errors": []}})
    response = service.configure("id123", LiveThreadCreateOrUpdateRequest(
        title="testtitle", description="testdescription",
        resources="testresources", nsfw=True,
    ))
    assert response.status_code == 200
    assert sent_form(mocked) == {
        "api_type": "json", "title": "testtitle", "description": "testdescription",
        "resources": "testresources", "nsfw": "true",
    }


def test_contributors(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123/contributors",
               json=contributor_listing(CURRENT))
    assert service.contributors("id123") == LiveThreadContributors(
        current=[
            LiveThreadContributor("t2_test1", "test1", ["all"]),
            LiveThreadContributor("t2_test2", "test2", ["all"]),
        ],
        invited=[],
    )


def test_contributors_and_invited(mocked, service):
    mocked.add(responses.GET, BASE + "live/id123/contributors",
               json=[contributor_listing(CURRENT), contributor_listing(INVITED)])
    result = service.contributors("id123")
    assert [c.name for c in result.current] == ["test1", "test2"]
    assert result.invited == [
        LiveThreadContributor("t2_test3", "test3", ["manage", "discussions"])
    ]


def test_contributors_rejects_bad_payload():
    with pytest.raises(ValueError):
        LiveThreadContributors.from_json("nonsense")


@pytest.mark.parametrize(
    "method, endpoint",
    [("accept", "accept_contributor_invite"), ("leave", "leave_contributor")],
)
def test_accept_and_leave(mocked, service, method, endpoint):
    mocked.add(responses.POST, BASE + f"api/live/id123/{endpoint}")
    response = getattr(service, method)("id123")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json"}


def test_invite_all_permissions(mocked, service):
    mocked.add(responses.POST, BASE + "api/live/id123/invite_contributor")
    response = service.invite("id123", "testuser", None)
    assert response.status_code == 200
    assert sent_form(mocked) == {
        "api_type": "json", "name": "testuser",
        "type": "liveupdate_contributor_invite", "permissions": "+all",
    }


def test_invite_permissions(mocked, service):
    mocked.add(responses.POST, BASE + "api/live/id123/invite_contributor")
    response = service.invite("id123", "testuser",
                              LiveThreadPermissions(close=True, manage=True, update=True))
    assert response.status_code == 200
    assert sent_form(mocked)["permissions"] == (
        "-all,+close,-discussions,-edit,+manage,-settings,+update"
    )


@pytest.mark.parametrize(
    "method, endpoint",
    [("uninvite", "rm_contributor_invite"), ("revoke", "rm_contributor")],
)
def test_uninvite_and_revoke(mocked, service, method, endpoint):
    mocked.add(responses.POST, BASE + f"api/live/id123/{endpoint}")
    response = getattr(service, method)("id123", "t2_test")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json", "id": "t2_test"}


@pytest.mark.parametrize(
    "method, kind",
    [
        ("set_permissions", "liveupdate_contributor"),
        ("set_permissions_for_invite", "liveupdate_contributor_invite"),
    ],
)
def test_set_permissions(mocked, service, method, kind):
    mocked.add(responses.POST, BASE + "api/live/id123/set_contributor_permissions")
    response = getattr(service, method)(
        "id123", "testuser",
        LiveThreadPermissions(discussions=True, edit=True, settings=True),
    )
    assert response.status_code == 200
    assert sent_form(mocked) == {
        "api_type": "json", "name": "testuser", "type": kind,
        "permissions": "-all,-close,+discussions,+edit,-manage,+settings,-update",
    }


@pytest.mark.parametrize(
    "method, endpoint",
    [("hide_discussion", "hide_discussion"), ("unhide_discussion", "unhide_discussion")],
)
def test_hide_and_unhide_discussion(mocked, service, method, endpoint):
    mocked.add(responses.POST, BASE + f"api/live/id123/{endpoint}")
    response = getattr(service, method)("id123", "t3_test")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json", "link": "t3_test"}


def test_report(mocked, service):
    with pytest.raises(ValueError, match="invalid reason for reporting live thread: invalidreason"):
        service.report("id123", "invalidreason")
    mocked.add(responses.POST, BASE + "api/live/id123/report")
    response = service.report("id123", "spam")
    assert response.status_code == 200
    assert sent_form(mocked) == {"api_type": "json", "type": "spam"}


def test_permissions_string():
    assert permissions_string(None) == "+all"
    assert permissions_string(LiveThreadPermissions(all=True)) == (
        "+all,-close,-discussions,-edit,-manage,-settings,-update"
    )


def test_request_form_leaves_out_empty_values():
    assert LiveThreadCreateOrUpdateRequest(title="t").to_form() == {"title": "t"}
    assert LiveThreadCreateOrUpdateRequest(nsfw=False).to_form() == {"nsfw": False}