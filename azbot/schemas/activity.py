from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityType(str, Enum):
    MESSAGE = "message"
    DELETE_USER_DATA = "deleteUserData"
    CONVERSATION_UPDATE = "conversationUpdate"
    CONTACT_RELATION_UPDATE = "contactRelationUpdate"
    TYPING = "typing"
    PING = "ping"


class ChannelAccount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None


class ConversationAccount(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: Optional[str] = None
    is_group: Optional[bool] = Field(default=None, alias="isGroup")


class Activity(BaseModel):
    """Inbound Bot Framework activity envelope."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str
    id: Optional[str] = None
    timestamp: Optional[str] = None
    service_url: str = Field(alias="serviceUrl")
    channel_id: str = Field(alias="channelId")
    from_user: ChannelAccount = Field(alias="from")
    conversation: ConversationAccount
    recipient: Optional[ChannelAccount] = None
    text: Optional[str] = None
    reply_to_id: Optional[str] = Field(default=None, alias="replyToId")
    action: Optional[str] = None

    @property
    def is_message(self) -> bool:
        return self.type == ActivityType.MESSAGE.value
