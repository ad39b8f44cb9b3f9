from azbot.config import Settings
from azbot.services.remote.base import (
    AccessToken,
    AuthError,
    RemoteEnumerationService,
    RemoteError,
    RemoteServiceError,
    ResourceGroup,
    Subscription,
)
from azbot.services.remote.management_api_provider import ManagementApiService
from azbot.services.remote.rest_proxy_provider import RestProxyService

REST_PROXY = "rest_proxy"
MANAGEMENT_API = "management_api"


def build_remote_service(settings: Settings) -> RemoteEnumerationService:
    """Pick the enumeration backend named by settings.remote_backend."""
    backend = (settings.remote_backend or REST_PROXY).strip().lower()
    if backend == MANAGEMENT_API:
        return ManagementApiService(
            authority_url=settings.authority_url,
            management_url=settings.management_url,
            subscriptions_api_version=settings.subscriptions_api_version,
            resource_groups_api_version=settings.resource_groups_api_version,
            timeout_seconds=settings.remote_timeout_seconds,
        )
    if backend == REST_PROXY:
        return RestProxyService(
            base_url=settings.rest_proxy_base_url,
            username=settings.rest_proxy_username,
            password=settings.rest_proxy_password,
            timeout_seconds=settings.remote_timeout_seconds,
        )
    raise ValueError(f"Unknown remote backend: {settings.remote_backend}")


__all__ = [
    "AccessToken",
    "AuthError",
    "ManagementApiService",
    "RemoteEnumerationService",
    "RemoteError",
    "RemoteServiceError",
    "ResourceGroup",
    "RestProxyService",
    "Subscription",
    "build_remote_service",
]
