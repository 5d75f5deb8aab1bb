"""Persistence for conversations, messages and per-user settings."""

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.models.conversation import Conversation, Message
from ouracoach.models.user_settings import UserSettings
from ouracoach.schemas.conversation import ConversationRead, MessageRead

logger = logging.getLogger(__name__)

ROLES = ("user", "assistant", "system")


class ConversationNotFoundError(Exception):
    def __init__(self, conversation_id: int) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class ConversationAccessError(Exception):
    def __init__(self, conversation_id: int) -> None:
        super().__init__(f"Conversation {conversation_id} belongs to another user")
        self.conversation_id = conversation_id


def _to_read(conversation: Conversation, messages: list[Message] | None = None) -> ConversationRead:
    return ConversationRead(
        id=conversation.id,
        user_id=conversation.user_id,
        title=conversation.title,
        created_at=conversation.created_at,
        messages=[MessageRead.model_validate(m) for m in messages or []],
    )


async def create_conversation(
    session: AsyncSession, user_id: str, title: str | None = None
) -> ConversationRead:
    conversation = Conversation(user_id=user_id, title=title or None)
    session.add(conversation)
    await session.commit()
    await session.refresh(conversation)
    return _to_read(conversation)


async def get_conversation(
    session: AsyncSession, conversation_id: int
) -> ConversationRead | None:
    """Get a conversation with its messages, oldest message first."""
    conversation = await session.get(Conversation, conversation_id)
    if conversation is None:
        return None
    result = await session.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at, Message.id)
    )
    return _to_read(conversation, list(result.scalars().all()))


async def get_owned_conversation(
    session: AsyncSession, conversation_id: int, user_id: str
) -> ConversationRead:
    """Get a conversation, enforcing that `user_id` owns it."""
    conversation = await get_conversation(session, conversation_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    if conversation.user_id != user_id:
        raise ConversationAccessError(conversation_id)
    return conversation


async def list_conversations(session: AsyncSession, user_id: str) -> list[ConversationRead]:
    """List a user's conversations, newest first, without messages."""
    result = await session.execute(
        select(Conversation)
        .where(Conversation.user_id == user_id)
        .order_by(Conversation.created_at.desc(), Conversation.id.desc())
    )
    return [_to_read(c) for c in result.scalars().all()]


async def add_message(
    session: AsyncSession, conversation_id: int, role: str, content: str
) -> MessageRead:
    if role not in ROLES:
        raise ValueError(f"Invalid message role: {role}")
    if await session.get(Conversation, conversation_id) is None:
        raise ConversationNotFoundError(conversation_id)

    message = Message(conversation_id=conversation_id, role=role, content=content)
    session.add(message)
    await session.commit()
    await session.refresh(message)
    return MessageRead.model_validate(message)


async def update_conversation_title(
    session: AsyncSession, conversation_id: int, title: str
) -> bool:
    conversation = await session.get(Conversation, conversation_id)
    if conversation is None:
        return False
    conversation.title = title
    await session.commit()
    return True


async def delete_conversation(session: AsyncSession, conversation_id: int) -> bool:
    """Delete a conversation and all of its messages."""
    conversation = await session.get(Conversation, conversation_id)
    if conversation is None:
        return False
    await session.execute(delete(Message).where(Message.conversation_id == conversation_id))
    await session.delete(conversation)
    await session.commit()
    logger.info("Deleted conversation %s", conversation_id)
    return True


async def set_oura_token(session: AsyncSession, user_id: str, oura_token: str) -> None:
    settings = await session.get(UserSettings, user_id)
    if settings is None:
        session.add(UserSettings(user_id=user_id, oura_token=oura_token))
    else:
        settings.oura_token = oura_token
        settings.updated_at = datetime.utcnow()
    await session.commit()


async def get_oura_token(session: AsyncSession, user_id: str) -> str | None:
    settings = await session.get(UserSettings, user_id)
    if settings is None:
        return None
    return settings.oura_token or None
