from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from redditwrap.message import Message, MessageService, SendMessageRequest
from redditwrap.transport import Transport

BASE = "https://api.example.com/"


def _epoch(*parts):
    return int(datetime(*parts, tzinfo=timezone.utc).timestamp())


INBOX_JSON = {
    "kind": "Listing",
    "data": {
        "after": None,
        "children": [
            {
                "kind": "t1",
                "data": {
                    "id": "g1xi2m9",
                    "name": "t1_g1xi2m9",
                    "created_utc": _epoch(2020, 8, 18, 0, 24, 13),
                    "subject": "post reply",
                    "body": "u/testuser2 hello",
                    "parent_id": "t3_hs03f3",
                    "author": "testuser1",
                    "dest": "testuser2",
                    "was_comment": True,
                },
            },
            {
                "kind": "t4",
                "data": {
                    "id": "qwki97",
                    "name": "t4_qwki97",
                    "created_utc": _epoch(2020, 8, 18, 0, 16, 53),
                    "subject": "re: test",
                    "body": "test",
                    "parent_id": "t4_qwki4m",
                    "author": "testuser1",
                    "dest": "testuser2",
                    "was_comment": False,
                },
            },
        ],
    },
}

EXPECTED_COMMENTS = [
    Message(
        id="g1xi2m9",
        full_id="t1_g1xi2m9",
        created=datetime(2020, 8, 18, 0, 24, 13, tzinfo=timezone.utc),
        subject="post reply",
        text="u/testuser2 hello",
        parent_id="t3_hs03f3",
        author="testuser1",
        to="testuser2",
        is_comment=True,
    )
]

EXPECTED_MESSAGES = [
    Message(
        id="qwki97",
        full_id="t4_qwki97",
        created=datetime(2020, 8, 18, 0, 16, 53, tzinfo=timezone.utc),
        subject="re: test",
        text="test",
        parent_id="t4_qwki4m",
        author="testuser1",
        to="testuser2",
        is_comment=False,
    )
]


def _form(call):
    body = call.request.body
    if body is None:
        return {}
    if isinstance(body, bytes):
        body = body.decode()
    return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True).items()}


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def service():
    return MessageService(Transport(base_url=BASE))


def test_read_all(service, mocked):
    mocked.add(responses.POST, BASE + "api/read_all_messages", status=202)
    response = service.read_all()
    assert response.status_code == 202


@pytest.mark.parametrize(
    "method, endpoint",
    [
        ("read", "api/read_message"),
        ("unread", "api/unread_message"),
        ("collapse", "api/collapse_message"),
        ("uncollapse", "api/uncollapse_message"),
    ],
)
def test_id_list_calls(service, mocked, method, endpoint):
    mocked.add(responses.POST, BASE + endpoint)
    with pytest.raises(ValueError, match="must provide at least 1 id"):
        getattr(service, method)()
    response = getattr(service, method)("test1", "test2", "test3")
    assert response.status_code == 200
    assert len(mocked.calls) == 1
    assert _form(mocked.calls[0]) == {"id": "test1,test2,test3"}


def test_block(service, mocked):
    mocked.add(responses.POST, BASE + "api/block")
    response = service.block("test")
    assert response.status_code == 200
    assert _form(mocked.calls[0]) == {"id": "test"}


def test_delete(service, mocked):
    mocked.add(responses.POST, BASE + "api/del_msg")
    response = service.delete("test")
    assert response.status_code == 200
    assert _form(mocked.calls[0]) == {"id": "test"}


def test_send(service, mocked):
    mocked.add(responses.POST, BASE + "api/compose")
    with pytest.raises(ValueError, match="send_request: cannot be None"):
        service.send(None)
    response = service.send(
        SendMessageRequest(
            to="test",
            subject="test subject",
            text="test text",
            from_subreddit="hello world",
        )
    )
    assert response.status_code == 200
    assert _form(mocked.calls[0]) == {
        "api_type": "json",
        "to": "test",
        "subject": "test subject",
        "text": "test text",
        "from_sr": "hello world",
    }


def test_send_request_form_without_subreddit():
    request = SendMessageRequest(to="a", subject="b", text="c")
    assert request.to_form() == {"to": "a", "subject": "b", "text": "c"}


def test_inbox(service, mocked):
    mocked.add(responses.GET, BASE + "message/inbox", json=INBOX_JSON)
    comments, messages = service.inbox(None)
    assert comments == EXPECTED_COMMENTS
    assert messages == EXPECTED_MESSAGES


def test_inbox_with_options(service, mocked):
    mocked.add(responses.GET, BASE + "message/inbox", json=INBOX_JSON)
    comments, messages = service.inbox({"limit": 5, "after": "t4_abc"})
    assert comments == EXPECTED_COMMENTS
    assert messages == EXPECTED_MESSAGES
    query = parse_qs(urlparse(mocked.calls[0].request.url).query)
    assert query == {"limit": ["5"], "after": ["t4_abc"]}


def test_inbox_unread(service, mocked):
    mocked.add(responses.GET, BASE + "message/unread", json=INBOX_JSON)
    comments, messages = service.inbox_unread(None)
    assert comments == EXPECTED_COMMENTS
    assert messages == EXPECTED_MESSAGES


def test_sent(service, mocked):
    mocked.add(responses.GET, BASE + "message/sent", json=INBOX_JSON)
    messages = service.sent(None)
    assert messages == EXPECTED_MESSAGES


def test_message_from_json_defaults():
    message = Message.from_json({"id": "x"})
    assert message == Message(id="x")