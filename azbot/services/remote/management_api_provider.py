from typing import List, Optional

import httpx

from azbot.logging_config import get_logger
from azbot.services.credentials import CredentialTuple
from azbot.services.remote.base import (
    AccessToken,
    AuthError,
    RemoteEnumerationService,
    RemoteError,
    ResourceGroup,
    Subscription,
    read_json,
    read_value_list,
)

logger = get_logger("remote.management_api")

MAX_PAGES = 50


class ManagementApiService(RemoteEnumerationService):
    """Azure Resource Manager called directly with a client-credentials token."""

    def __init__(
        self,
        authority_url: str = "https://login.microsoftonline.com",
        management_url: str = "https://management.azure.com",
        subscriptions_api_version: str = "2016-06-01",
        resource_groups_api_version: str = "2016-09-01",
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout_seconds=timeout_seconds, transport=transport)
        self.authority_url = authority_url.rstrip("/")
        self.management_url = management_url.rstrip("/")
        self.subscriptions_api_version = subscriptions_api_version
        self.resource_groups_api_version = resource_groups_api_version

    async def authorize(self, credentials: CredentialTuple) -> AccessToken:
        response = await self._request(
            "POST",
            f"{self.authority_url}/{credentials.tenant_id}/oauth2/token",
            data={
                "grant_type": "client_credentials",
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
                "resource": f"{self.management_url}/",
            },
        )
        if response.status_code in (400, 401, 403):
            raise AuthError(f"Token request rejected for client {credentials.client_id}: {response.status_code}")
        if response.status_code != 200:
            raise RemoteError(f"Token endpoint failed: {response.status_code}")

        payload = read_json(response)
        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise RemoteError("Token response has no access_token")
        return AccessToken(
            value=access_token,
            credentials=credentials,
            token_type=payload.get("token_type") or "Bearer",
        )

    async def list_subscriptions(self, token: AccessToken) -> List[Subscription]:
        items = await self._get_all(
            f"{self.management_url}/subscriptions",
            token,
            self.subscriptions_api_version,
        )
        try:
            return [
                Subscription(id=str(item["subscriptionId"]), display_name=str(item.get("displayName") or ""))
                for item in items
            ]
        except KeyError as exc:
            raise RemoteError(f"Subscription item missing {exc}") from exc

    async def list_resource_groups(self, token: AccessToken, subscription_id: str) -> List[ResourceGroup]:
        items = await self._get_all(
            f"{self.management_url}/subscriptions/{subscription_id}/resourcegroups",
            token,
            self.resource_groups_api_version,
        )
        try:
            return [ResourceGroup(name=str(item["name"])) for item in items]
        except KeyError as exc:
            raise RemoteError(f"Resource group item missing {exc}") from exc

    async def _get_all(self, url: str, token: AccessToken, api_version: str) -> list[dict]:
        """GET a list resource, following nextLink pages."""
        items: list[dict] = []
        params: Optional[dict] = {"api-version": api_version}
        next_url: Optional[str] = url

        for _ in range(MAX_PAGES):
            response = await self._request("GET", next_url, params=params, headers={"Authorization": token.header})
            logger.debug(f"ARM GET {next_url} status={response.status_code}")

            if response.status_code in (401, 403):
                raise AuthError(f"Management API rejected token: {response.status_code}")
            if response.status_code != 200:
                raise RemoteError(f"Management API failed: {response.status_code}")

            payload = read_json(response)
            items.extend(read_value_list(payload))

            next_url = payload.get("nextLink")
            if not next_url:
                return items
            # nextLink already carries api-version and skip token
            params = None

        logger.warning(f"Stopped following nextLink after {MAX_PAGES} pages: {url}")
        return items
