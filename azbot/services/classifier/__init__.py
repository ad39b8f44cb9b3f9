from azbot.logging_config import get_logger
from azbot.services.classifier.base import ClassificationError, Entity, Intent, IntentClassifier, IntentScore
from azbot.services.classifier.luis_provider import LuisClassifier

logger = get_logger("classifier")


async def classify_or_unrecognized(classifier: IntentClassifier, text: str) -> Intent:
    """Classify text; any classifier failure becomes an unrecognized intent."""
    try:
        return await classifier.classify(text)
    except ClassificationError as exc:
        logger.warning(f"Classification failed, treating as unrecognized: {exc}")
        return Intent.unrecognized(text)


__all__ = [
    "ClassificationError",
    "Entity",
    "Intent",
    "IntentClassifier",
    "IntentScore",
    "LuisClassifier",
    "classify_or_unrecognized",
]
