import logging

import httpx
import pytest

from videoindexer import http
from videoindexer.errors import ApiError


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda seconds: None)


def test_redact_hides_access_token():
    url = http.redact("https://api.videoindexer.ai/westus2/Accounts/a/Videos?accessToken=secret&name=clip.mp4")
    assert "secret" not in url
    assert "name=clip.mp4" in url


def test_redact_leaves_other_urls_alone():
    assert http.redact("https://example.com/path?a=1") == "https://example.com/path?a=1"


def test_unexpected_status_raises_api_error():
    def handler(request):
        return httpx.Response(401, text="token expired")

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ApiError) as excinfo:
            http.send(client, "GET", "https://api.videoindexer.ai/x?accessToken=secret")

    assert excinfo.value.status_code == 401
    assert not excinfo.value.transient
    assert "secret" not in str(excinfo.value)
    assert "token expired" in str(excinfo.value)


def test_retries_transient_failures(no_sleep):
    responses = [httpx.Response(503), httpx.Response(429), httpx.Response(200, json={"ok": True})]

    def handler(request):
        return responses.pop(0)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        response = http.send(client, "GET", "https://api.videoindexer.ai/x")

    assert response.json() == {"ok": True}
    assert responses == []


def test_gives_up_after_four_attempts(no_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ApiError):
            http.send(client, "GET", "https://api.videoindexer.ai/x")

    assert len(calls) == 4


def test_does_not_retry_client_errors():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ApiError):
            http.send(client, "POST", "https://api.videoindexer.ai/x")

    assert len(calls) == 1


def test_redact_hides_sas_signature_and_function_key():
    url = http.redact("https://acct.blob.core.windows.net/videos/clip.mp4?sp=r&sig=abc123&code=fnkey")
    assert "abc123" not in url
    assert "fnkey" not in url
    assert "sp=r" in url


def test_httpx_request_lines_are_not_logged_at_info(caplog):
    caplog.set_level(logging.INFO)

    def handler(request):
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        http.send(client, "GET", "https://api.videoindexer.ai/x?accessToken=secret")

    assert not [r for r in caplog.records if "secret" in r.getMessage()]


def test_send_once_does_not_repeat_after_read_timeout(no_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ReadTimeout):
            http.send_once(client, "POST", "https://api.videoindexer.ai/x")

    assert len(calls) == 1


def test_send_once_retries_connection_failures(no_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        http.send_once(client, "POST", "https://api.videoindexer.ai/x")

    assert len(calls) == 2


def test_send_retries_read_timeouts(no_sleep):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        http.send(client, "GET", "https://api.videoindexer.ai/x")

    assert len(calls) == 2
