import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from azbot.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BotState(Base):
    __tablename__ = "bot_state"
    __table_args__ = (UniqueConstraint("channel_id", "conversation_id", "user_id", name="uq_bot_state_key"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    channel_id = Column(String(64), nullable=False)
    conversation_id = Column(String(256), nullable=False, default="")  # empty for per-user scope
    user_id = Column(String(256), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
