from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from azbot.config import Settings, get_settings
from azbot.database import get_db
from azbot.logging_config import conversation_logger, get_logger
from azbot.schemas.activity import Activity
from azbot.services.activity_service import handle_system_activity
from azbot.services.classifier import LuisClassifier
from azbot.services.connector_service import ConnectorClient
from azbot.services.conversation_lock import conversation_locks
from azbot.services.dialog_service import DialogOutcome, DialogStateMachine
from azbot.services.query_formatter import RemoteQueryFormatter
from azbot.services.remote import build_remote_service
from azbot.services.state_store import ConversationStateStore, StaleStateError

logger = get_logger("messages")

router = APIRouter()

MSG_INTERNAL_ERROR = "Sorry, something went wrong. Please try again later."

_dialog_machine: Optional[DialogStateMachine] = None
_connector: Optional[ConnectorClient] = None


def get_dialog_machine() -> DialogStateMachine:
    """Get or create the dialog machine for the configured backends."""
    global _dialog_machine
    if _dialog_machine is None:
        settings = get_settings()
        classifier = LuisClassifier(
            app_id=settings.luis_app_id,
            subscription_key=settings.luis_subscription_key,
            endpoint=settings.luis_endpoint,
            timeout_seconds=settings.classifier_timeout_seconds,
        )
        formatter = RemoteQueryFormatter(build_remote_service(settings))
        _dialog_machine = DialogStateMachine(classifier, formatter)
    return _dialog_machine


def get_connector() -> ConnectorClient:
    global _connector
    if _connector is None:
        settings = get_settings()
        _connector = ConnectorClient(token=settings.connector_token, timeout_seconds=settings.connector_timeout_seconds)
    return _connector


async def process_message(
    activity: Activity,
    store: ConversationStateStore,
    machine: DialogStateMachine,
    db: Session,
    max_attempts: int = 3,
) -> str:
    """Run one message through the dialog machine and persist the new state."""
    channel_id = activity.channel_id
    conversation_id = activity.conversation.id
    user_id = activity.from_user.id
    text = activity.text or ""

    async with conversation_locks.acquire(store.key(channel_id, conversation_id, user_id)):
        for attempt in range(1, max(max_attempts, 1) + 1):
            stored = store.get(channel_id, conversation_id, user_id)
            outcome: DialogOutcome = await machine.handle(stored.state, text)
            if not outcome.changed:
                return outcome.reply
            try:
                store.set(channel_id, conversation_id, user_id, outcome.state, stored.version)
                db.commit()
                return outcome.reply
            except StaleStateError as e:
                db.rollback()
                logger.warning(f"Stale state on attempt {attempt}: {e}")

    logger.error(f"Giving up after {max_attempts} conflicting state writes for {conversation_id}")
    return MSG_INTERNAL_ERROR


@router.post("/api/messages")
async def handle_activity(
    activity: Activity,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    machine: DialogStateMachine = Depends(get_dialog_machine),
    connector: ConnectorClient = Depends(get_connector),
):
    """Receive an activity from the channel. Always acknowledged with an empty 200."""
    log = conversation_logger(logger, activity.channel_id, activity.conversation.id, activity.from_user.id)
    store = ConversationStateStore(db, scope=settings.state_scope)

    if not activity.is_message:
        try:
            handle_system_activity(activity, store)
            db.commit()
        except Exception:
            db.rollback()
            log.error(f"System activity {activity.type} failed", exc_info=True)
        return Response(status_code=200)

    try:
        reply = await process_message(activity, store, machine, db, max_attempts=settings.state_write_retries)
    except Exception:
        db.rollback()
        log.error("Message handling failed", exc_info=True)
        reply = MSG_INTERNAL_ERROR

    sent = await connector.send_reply(activity, reply)
    log.info("Reply delivered" if sent else "Reply not delivered", context={"sent": sent})
    return Response(status_code=200)
