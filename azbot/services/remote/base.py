from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from azbot.services.credentials import CredentialTuple


class RemoteServiceError(Exception):
    pass


class AuthError(RemoteServiceError):
    """Credentials rejected by the authorization step."""


class RemoteError(RemoteServiceError):
    """Transport failure, timeout or unreadable payload on an enumeration call."""


@dataclass(frozen=True)
class AccessToken:
    value: str
    credentials: CredentialTuple
    token_type: str = "Bearer"

    @property
    def header(self) -> str:
        return f"{self.token_type} {self.value}"


@dataclass(frozen=True)
class Subscription:
    id: str
    display_name: str


@dataclass(frozen=True)
class ResourceGroup:
    name: str


class RemoteEnumerationService(ABC):
    """Abstract base class for subscription and resource-group listing backends."""

    def __init__(self, timeout_seconds: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    @abstractmethod
    async def authorize(self, credentials: CredentialTuple) -> AccessToken:
        """Exchange credentials for a token. Raises AuthError or RemoteError."""
        pass

    @abstractmethod
    async def list_subscriptions(self, token: AccessToken) -> List[Subscription]:
        pass

    @abstractmethod
    async def list_resource_groups(self, token: AccessToken, subscription_id: str) -> List[ResourceGroup]:
        pass

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                return await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteError(f"Timeout after {self.timeout_seconds}s: {url}") from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"Transport error: {exc}") from exc


def read_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteError(f"Unparsable response body (status={response.status_code})") from exc


def read_value_list(payload: Any) -> list[dict]:
    """Return the `value` array of an ARM-style list payload."""
    items = payload.get("value") if isinstance(payload, dict) else None
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise RemoteError("Response has no `value` list")
    return items
