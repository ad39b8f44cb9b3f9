import base64
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

logger = get_logger("remote.rest_proxy")


class RestProxyService(RemoteEnumerationService):
    """ARM proxy that signs in server-side from credentials passed as query params."""

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout_seconds=timeout_seconds, transport=transport)
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password

    async def authorize(self, credentials: CredentialTuple) -> AccessToken:
        basic = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return AccessToken(value=basic, credentials=credentials, token_type="Basic")

    async def list_subscriptions(self, token: AccessToken) -> List[Subscription]:
        items = await self._get("GetSubscriptions", token, {})
        try:
            return [
                Subscription(id=str(item["subscriptionId"]), display_name=str(item.get("displayName") or ""))
                for item in items
            ]
        except KeyError as exc:
            raise RemoteError(f"Subscription item missing {exc}") from exc

    async def list_resource_groups(self, token: AccessToken, subscription_id: str) -> List[ResourceGroup]:
        items = await self._get("GetResourceGroups", token, {"subscriptionId": subscription_id})
        try:
            return [ResourceGroup(name=str(item["name"])) for item in items]
        except KeyError as exc:
            raise RemoteError(f"Resource group item missing {exc}") from exc

    async def _get(self, operation: str, token: AccessToken, extra_params: dict) -> list[dict]:
        creds = token.credentials
        params = {
            "clientId": creds.client_id,
            "clientSecret": creds.client_secret,
            "tenantId": creds.tenant_id,
            **extra_params,
        }
        response = await self._request(
            "GET",
            f"{self.base_url}/{operation}",
            params=params,
            headers={"Authorization": token.header, "Content-Type": "application/json"},
        )
        logger.debug(f"Proxy {operation} status={response.status_code} client_id={creds.client_id}")

        if response.status_code in (401, 403):
            raise AuthError(f"Proxy rejected credentials for client {creds.client_id}")
        if response.status_code != 200:
            raise RemoteError(f"Proxy {operation} failed: {response.status_code}")
        return read_value_list(read_json(response))
