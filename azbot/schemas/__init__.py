from azbot.schemas.activity import Activity, ActivityType, ChannelAccount, ConversationAccount

__all__ = ["Activity", "ActivityType", "ChannelAccount", "ConversationAccount"]
