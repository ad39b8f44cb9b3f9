from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from azbot.logging_config import get_logger
from azbot.models import BotState
from azbot.services.state_machine import ConversationState

logger = get_logger("state_store")

SCOPE_CONVERSATION = "conversation"
SCOPE_USER = "user"


class StaleStateError(Exception):
    def __init__(self, key: tuple[str, str, str], expected_version: int):
        self.key = key
        self.expected_version = expected_version
        super().__init__(f"State for {key} changed since version {expected_version}")


@dataclass(frozen=True)
class StoredState:
    state: ConversationState
    version: int = 0


class ConversationStateStore:
    """Durable dialog variables keyed by (channel, conversation, user).

    With scope "user" the conversation id is ignored, so a user's answers follow
    them across conversations on the same channel.
    """

    def __init__(self, db: Session, scope: str = SCOPE_CONVERSATION):
        if scope not in (SCOPE_CONVERSATION, SCOPE_USER):
            raise ValueError(f"Unknown state scope: {scope}")
        self.db = db
        self.scope = scope

    def key(self, channel_id: str, conversation_id: str, user_id: str) -> tuple[str, str, str]:
        if self.scope == SCOPE_USER:
            conversation_id = ""
        return channel_id, conversation_id, user_id

    def _find(self, key: tuple[str, str, str]) -> BotState | None:
        channel_id, conversation_id, user_id = key
        return (
            self.db.query(BotState)
            .filter(
                BotState.channel_id == channel_id,
                BotState.conversation_id == conversation_id,
                BotState.user_id == user_id,
            )
            .first()
        )

    def get(self, channel_id: str, conversation_id: str, user_id: str) -> StoredState:
        row = self._find(self.key(channel_id, conversation_id, user_id))
        if row is None:
            return StoredState(ConversationState(), 0)
        return StoredState(ConversationState.from_dict(row.data), row.version)

    def set(
        self,
        channel_id: str,
        conversation_id: str,
        user_id: str,
        state: ConversationState,
        expected_version: int,
    ) -> int:
        """Compare-and-swap write. Returns the new version or raises StaleStateError."""
        key = self.key(channel_id, conversation_id, user_id)
        now = datetime.now(timezone.utc)

        if expected_version == 0:
            if self._find(key) is not None:
                raise StaleStateError(key, expected_version)
            self.db.add(
                BotState(
                    channel_id=key[0],
                    conversation_id=key[1],
                    user_id=key[2],
                    data=state.to_dict(),
                    version=1,
                    updated_at=now,
                )
            )
            try:
                self.db.flush()
            except IntegrityError as exc:
                # Another writer inserted the same key between _find and flush.
                self.db.rollback()
                raise StaleStateError(key, expected_version) from exc
            return 1

        updated = (
            self.db.query(BotState)
            .filter(
                BotState.channel_id == key[0],
                BotState.conversation_id == key[1],
                BotState.user_id == key[2],
                BotState.version == expected_version,
            )
            .update(
                {
                    BotState.data: state.to_dict(),
                    BotState.version: expected_version + 1,
                    BotState.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise StaleStateError(key, expected_version)
        self.db.flush()
        return expected_version + 1

    def delete(self, channel_id: str, user_id: str) -> int:
        """Remove every stored state for the user on the channel."""
        deleted = (
            self.db.query(BotState)
            .filter(BotState.channel_id == channel_id, BotState.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        logger.info(f"Deleted {deleted} state rows for user {user_id} on {channel_id}")
        return deleted
