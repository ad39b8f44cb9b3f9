from typing import Optional
from urllib.parse import quote

import httpx

from azbot.logging_config import get_logger
from azbot.schemas.activity import Activity

logger = get_logger("connector_service")


def build_reply_payload(activity: Activity, text: str) -> dict:
    payload = {
        "type": "message",
        "text": text,
        "conversation": {"id": activity.conversation.id},
        "recipient": {"id": activity.from_user.id, "name": activity.from_user.name},
        "channelId": activity.channel_id,
    }
    if activity.recipient is not None:
        payload["from"] = {"id": activity.recipient.id, "name": activity.recipient.name}
    if activity.id:
        payload["replyToId"] = activity.id
    return payload


def build_reply_url(activity: Activity) -> str:
    base = activity.service_url.rstrip("/")
    conversation_id = quote(activity.conversation.id, safe="")
    if activity.id:
        return f"{base}/v3/conversations/{conversation_id}/activities/{quote(activity.id, safe='')}"
    return f"{base}/v3/conversations/{conversation_id}/activities"


class ConnectorClient:
    """Delivers reply text back to the channel that sent the activity."""

    def __init__(
        self,
        token: str = "",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def send_reply(self, activity: Activity, text: str) -> bool:
        """Send reply. Failures are logged and reported as False."""
        if not text:
            return False

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = build_reply_url(activity)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.post(url, json=build_reply_payload(activity, text), headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Error sending reply to {activity.channel_id}: {e}")
            return False

        if response.status_code >= 300:
            logger.error(
                f"Reply rejected: status={response.status_code}, channel={activity.channel_id}, "
                f"body={response.text[:200]}"
            )
            return False
        return True
