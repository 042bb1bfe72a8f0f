from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import httpx
import pytest
from azure.core.credentials import AccessToken

from videoindexer import resource_provider
from videoindexer.settings import Settings

ACCOUNT_PATH = "/subscriptions/sub-1/resourcegroups/rg-1/providers/Microsoft.VideoIndexer/accounts/vi-account"
VIDEOS_PATH = "/westus2/Accounts/acc-123/Videos"
CAPTIONS = "WEBVTT\n\n00:00:00.000 --> 00:00:02.000\nHello there.\n"


class FakeApis:
    """Stands in for ARM and Video Indexer behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.overrides = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.overrides:
            override = self.overrides[key]
            if isinstance(override, list):
                return override.pop(0)
            return override(request) if callable(override) else override

        if key == ("GET", ACCOUNT_PATH):
            return httpx.Response(200, json={"location": "westus2", "properties": {"accountId": "acc-123"}})
        if key == ("POST", ACCOUNT_PATH + "/generateAccessToken"):
            return httpx.Response(200, json={"accessToken": "vi-token"})
        if key == ("POST", VIDEOS_PATH):
            return httpx.Response(200, json={"id": "vid-1", "name": request.url.params["name"], "state": "Uploaded"})
        if key == ("GET", VIDEOS_PATH + "/vid-1/Captions"):
            return httpx.Response(200, text=CAPTIONS)
        return httpx.Response(404, json={"error": "not found"})

    def paths(self):
        return [(r.method, r.url.path) for r in self.requests]


@pytest.fixture(autouse=True)
def clear_access_token_cache():
    resource_provider.access_token_cache.clear()
    yield
    resource_provider.access_token_cache.clear()


@pytest.fixture
def settings():
    return Settings(
        storage_connection_string="UseDevelopmentStorage=true",
        container_name="videos",
        callback_url="https://myfunc.azurewebsites.net/api/GetVideoStatus?code=abc",
        subscription_id="sub-1",
        resource_group="rg-1",
        account_name="vi-account",
    )


@pytest.fixture
def fake_apis():
    return FakeApis()


@pytest.fixture
def http_client(fake_apis):
    with httpx.Client(transport=httpx.MockTransport(fake_apis), follow_redirects=False) as client:
        yield client


@pytest.fixture
def credential():
    credential = MagicMock()
    credential.get_token.return_value = AccessToken("arm-token", int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp()))
    return credential


@pytest.fixture
def storage():
    storage = MagicMock()
    storage.generate_sas_uri.side_effect = lambda name: f"https://acct.blob.core.windows.net/videos/{name}?sp=r&sig=xyz"
    return storage
