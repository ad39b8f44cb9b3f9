from typing import Any, Optional

import httpx

from azbot.logging_config import get_logger
from azbot.services.classifier.base import ClassificationError, Entity, Intent, IntentClassifier, IntentScore

logger = get_logger("classifier.luis")


class LuisClassifier(IntentClassifier):
    """LUIS v1 application endpoint."""

    def __init__(
        self,
        app_id: str,
        subscription_key: str,
        endpoint: str = "https://api.projectoxford.ai/luis/v1/application",
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.subscription_key = subscription_key
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def classify(self, text: str) -> Intent:
        params = {"id": self.app_id, "subscription-key": self.subscription_key, "q": text}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
                response = await client.get(self.endpoint, params=params)
        except httpx.TimeoutException as exc:
            raise ClassificationError(f"LUIS timeout after {self.timeout_seconds}s") from exc
        except httpx.HTTPError as exc:
            raise ClassificationError(f"LUIS transport error: {exc}") from exc

        if response.status_code != 200:
            raise ClassificationError(f"LUIS error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ClassificationError("LUIS returned invalid JSON") from exc

        intent = parse_luis_response(data)
        logger.debug(f"LUIS intent: {intent.label}, entities={len(intent.entities)}")
        return intent


def parse_luis_response(data: Any) -> Intent:
    if not isinstance(data, dict):
        raise ClassificationError("LUIS payload is not an object")

    try:
        intents = [
            IntentScore(label=str(item["intent"]), score=float(item.get("score") or 0.0))
            for item in data.get("intents") or []
        ]
        entities = [
            Entity(
                text=str(item["entity"]),
                type=str(item.get("type") or ""),
                score=float(item.get("score") or 0.0),
                start_index=item.get("startIndex"),
                end_index=item.get("endIndex"),
            )
            for item in data.get("entities") or []
        ]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ClassificationError(f"LUIS payload malformed: {exc}") from exc

    intents.sort(key=lambda item: item.score, reverse=True)
    return Intent(query=str(data.get("query") or ""), intents=intents, entities=entities)
