# tailscale_notifier/tests/test_pushover.py

import io
import json
import urllib.error
import urllib.parse
import urllib.request

import pytest

from tailscale_notifier.errors import NotificationError
from tailscale_notifier.logging import get_logger
from tailscale_notifier.services.notifiers.pushover import PushoverNotifier


LOG = get_logger("pushover-test")


class FakeHTTPResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeUrlopen:
    def __init__(self, body=b"", error=None):
        self.body = body
        self.error = error
        self.requests = []
        self.timeouts = []

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return FakeHTTPResponse(self.body)


@pytest.fixture
def urlopen(monkeypatch):
    def _install(**kwargs):
        fake = FakeUrlopen(**kwargs)
        monkeypatch.setattr(urllib.request, "urlopen", fake)
        return fake

    return _install


def test_send_message_posts_form(urlopen):
    fake = urlopen(body=json.dumps({"status": 1, "request": "abc-123"}).encode())
    notifier = PushoverNotifier("app-token", "user-key", LOG)

    payload = notifier.send_message("laptop has expired!")

    assert payload == {"status": 1, "request": "abc-123"}
    assert len(fake.requests) == 1
    req = fake.requests[0]
    assert req.full_url == PushoverNotifier.API_URL
    assert req.get_method() == "POST"
    assert fake.timeouts == [10]
    assert urllib.parse.parse_qs(req.data.decode()) == {
        "token": ["app-token"],
        "user": ["user-key"],
        "message": ["laptop has expired!"],
    }


def test_http_rejection_is_fatal(urlopen):
    body = json.dumps({"status": 0, "errors": ["application token is invalid"]}).encode()
    urlopen(
        error=urllib.error.HTTPError(
            PushoverNotifier.API_URL, 400, "Bad Request", {}, io.BytesIO(body)
        )
    )
    notifier = PushoverNotifier("", "", LOG)

    with pytest.raises(NotificationError, match="application token is invalid"):
        notifier.send_message("2 devices are expired!")


def test_unreachable_is_fatal(urlopen):
    urlopen(error=urllib.error.URLError("Name or service not known"))
    with pytest.raises(NotificationError, match="Failed to reach Pushover"):
        PushoverNotifier("t", "u", LOG).send_message("hi")


def test_timeout_is_fatal(urlopen):
    urlopen(error=TimeoutError("timed out"))
    with pytest.raises(NotificationError, match="timed out"):
        PushoverNotifier("t", "u", LOG).send_message("hi")


def test_non_success_status_is_fatal(urlopen):
    urlopen(body=json.dumps({"status": 0, "errors": ["user key is invalid"]}).encode())
    with pytest.raises(NotificationError, match="user key is invalid"):
        PushoverNotifier("t", "u", LOG).send_message("hi")


def test_non_json_response_is_fatal(urlopen):
    urlopen(body=b"<html>maintenance</html>")
    with pytest.raises(NotificationError, match="non-JSON"):
        PushoverNotifier("t", "u", LOG).send_message("hi")
