from azbot.logging_config import get_logger
from azbot.schemas.activity import Activity, ActivityType
from azbot.services.state_store import ConversationStateStore

logger = get_logger("activity_service")

DELETION_ACTIVITIES = {ActivityType.DELETE_USER_DATA.value, ActivityType.CONTACT_RELATION_UPDATE.value}


def handle_system_activity(activity: Activity, store: ConversationStateStore) -> bool:
    """Acknowledge a non-message activity. Returns True if user state was deleted."""
    if activity.type in DELETION_ACTIVITIES:
        store.delete(activity.channel_id, activity.from_user.id)
        logger.info(
            "User state deleted",
            extra={"context": {"type": activity.type, "channel": activity.channel_id, "user": activity.from_user.id}},
        )
        return True

    if activity.type == ActivityType.CONVERSATION_UPDATE.value:
        logger.debug(f"Conversation update in {activity.conversation.id}")
    elif activity.type in (ActivityType.TYPING.value, ActivityType.PING.value):
        pass
    else:
        logger.info(f"Ignoring unknown activity type {activity.type}")
    return False
