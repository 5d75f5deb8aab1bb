from ouracoach.models.conversation import Conversation, Message
from ouracoach.models.user_settings import UserSettings

__all__ = [
    "Conversation",
    "Message",
    "UserSettings",
]
