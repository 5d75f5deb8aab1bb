from pydantic import Field

from ouracoach.schemas.base import CamelModel


class QuickReply(CamelModel):
    transcript: str
    reply: str


class VoiceReply(QuickReply):
    conversation_id: int
    conversation_title: str | None = None
    is_new_conversation: bool
    audio: str | None = None  # base64 MP3


class TTSRequest(CamelModel):
    text: str = Field(min_length=1)
    voice: str | None = None


class VoiceInfo(CamelModel):
    name: str
    id: str
    description: str
