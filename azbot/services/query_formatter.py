from typing import Iterable

from azbot.logging_config import get_logger
from azbot.services.credentials import CredentialTuple
from azbot.services.remote import (
    AuthError,
    RemoteEnumerationService,
    RemoteError,
    ResourceGroup,
    Subscription,
)
from azbot.services.result import AUTH_ERROR, REMOTE_ERROR, Result

logger = get_logger("query_formatter")

SUBSCRIPTIONS_HEADER = "Your subscriptions:"
RESOURCE_GROUPS_HEADER = "Your resource groups:"


def render_subscriptions(subscriptions: Iterable[Subscription]) -> str:
    lines = [SUBSCRIPTIONS_HEADER]
    lines.extend(f"SubscriptionId: {sub.id}, DisplayName: {sub.display_name}" for sub in subscriptions)
    return "\n".join(lines)


def render_resource_groups(groups: Iterable[ResourceGroup]) -> str:
    lines = [RESOURCE_GROUPS_HEADER]
    lines.extend(f"Name: {group.name}" for group in groups)
    return "\n".join(lines)


class RemoteQueryFormatter:
    """Runs enumeration lookups and renders them as reply text. No retries."""

    def __init__(self, service: RemoteEnumerationService):
        self.service = service

    async def list_subscriptions(self, creds: CredentialTuple) -> Result[str]:
        try:
            token = await self.service.authorize(creds)
            subscriptions = await self.service.list_subscriptions(token)
        except AuthError as e:
            logger.warning(f"Subscription lookup unauthorized: {e}")
            return Result.failure(str(e), AUTH_ERROR)
        except RemoteError as e:
            logger.error(f"Subscription lookup failed: {e}")
            return Result.failure(str(e), REMOTE_ERROR)

        logger.info(
            "Subscriptions listed",
            extra={"context": {"client_id": creds.client_id, "count": len(subscriptions)}},
        )
        return Result.success(render_subscriptions(subscriptions))

    async def list_resource_groups(self, creds: CredentialTuple, subscription_id: str) -> Result[str]:
        try:
            token = await self.service.authorize(creds)
            groups = await self.service.list_resource_groups(token, subscription_id)
        except AuthError as e:
            logger.warning(f"Resource group lookup unauthorized: {e}")
            return Result.failure(str(e), AUTH_ERROR)
        except RemoteError as e:
            logger.error(f"Resource group lookup failed: {e}")
            return Result.failure(str(e), REMOTE_ERROR)

        logger.info(
            "Resource groups listed",
            extra={"context": {"subscription_id": subscription_id, "count": len(groups)}},
        )
        return Result.success(render_resource_groups(groups))
