from datetime import datetime

from pydantic import Field

from ouracoach.schemas.base import CamelModel


class MessageRead(CamelModel):
    id: int
    role: str = Field(pattern=r"^(user|assistant|system)$")
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationCreate(CamelModel):
    title: str | None = Field(default=None, max_length=255)


class ConversationUpdate(CamelModel):
    title: str | None = Field(default=None, max_length=255)


class ConversationRead(CamelModel):
    id: int
    user_id: str
    title: str | None = None
    created_at: datetime
    messages: list[MessageRead] = []

    model_config = {"from_attributes": True}
