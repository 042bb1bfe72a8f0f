import logging
import time
from typing import Optional

import httpx
from azure.identity import DefaultAzureCredential

from videoindexer import http
from videoindexer.errors import AccountNotFoundError, VideoIndexerError
from videoindexer.models import AccessTokenRequest, Account, ArmAccessTokenPermission, ArmAccessTokenScope
from videoindexer.settings import Settings

AZURE_RESOURCE_MANAGER = "https://management.azure.com"
API_VERSION = "2022-08-01"

# Video Indexer access tokens are valid for one hour
ACCESS_TOKEN_TTL = 50 * 60

access_token_cache = {}
CACHE_KEY_TOKEN = "access_token"
CACHE_KEY_CREATED_TIME = "created_time"


class VideoIndexerResourceProviderClient:
    """Talks to the Microsoft.VideoIndexer resource provider through ARM."""

    def __init__(self, arm_access_token: str, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.arm_access_token = arm_access_token
        self.settings = settings.require("subscription_id", "resource_group", "account_name")
        self.http_client = http_client or http.new_client()

    @classmethod
    def build(cls, settings: Settings, credential=None, http_client: Optional[httpx.Client] = None):
        """Builds the client with an ARM token from the managed identity or developer login."""
        credential = credential or DefaultAzureCredential(exclude_environment_credential=True)
        token = credential.get_token(f"{AZURE_RESOURCE_MANAGER}/.default")
        return cls(token.token, settings, http_client=http_client)

    @property
    def account_url(self) -> str:
        s = self.settings
        return (
            f"{AZURE_RESOURCE_MANAGER}/subscriptions/{s.subscription_id}/resourcegroups/{s.resource_group}"
            f"/providers/Microsoft.VideoIndexer/accounts/{s.account_name}"
        )

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.arm_access_token}"}

    def get_account(self) -> Account:
        account_name = self.settings.account_name
        logging.info(f"Getting account {account_name}.")
        response = http.send(
            self.http_client, "GET", self.account_url, params={"api-version": API_VERSION}, headers=self.headers
        )
        account = Account.from_json(response.json())
        if not account.is_valid():
            logging.error(
                f"AccountName {account_name} not found. Check SubscriptionId, ResourceGroup, AccountName are valid."
            )
            raise AccountNotFoundError(f"Account {account_name} not found.")

        logging.info(f"The account ID is {account.account_id}")
        logging.info(f"The account location is {account.location}")
        return account

    def get_access_token(
        self,
        permission: ArmAccessTokenPermission,
        scope: ArmAccessTokenScope,
        video_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> str:
        if scope == ArmAccessTokenScope.VIDEO and not video_id:
            raise ValueError("video_id is required for a video scoped access token")
        if scope == ArmAccessTokenScope.PROJECT and not project_id:
            raise ValueError("project_id is required for a project scoped access token")

        key = (self.account_url, permission.value, scope.value, video_id, project_id)
        cached = access_token_cache.get(key)
        if cached and cached[CACHE_KEY_CREATED_TIME] + ACCESS_TOKEN_TTL > time.time():
            return cached[CACHE_KEY_TOKEN]

        token_request = AccessTokenRequest(permission, scope, video_id=video_id, project_id=project_id)
        logging.info(f"Getting access token: {token_request.to_json()}")
        response = http.send(
            self.http_client,
            "POST",
            f"{self.account_url}/generateAccessToken",
            params={"api-version": API_VERSION},
            headers=self.headers,
            json=token_request.to_json(),
        )
        token = response.json().get("accessToken")
        if not token:
            raise VideoIndexerError("generateAccessToken returned no accessToken")
        logging.info(f"Got access token: {scope.value}, {permission.value}")

        access_token_cache[key] = {CACHE_KEY_TOKEN: token, CACHE_KEY_CREATED_TIME: time.time()}
        return token
