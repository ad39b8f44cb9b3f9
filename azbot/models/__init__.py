from azbot.models.bot_state import BotState

__all__ = ["BotState"]
