"""Conversation CRUD, scoped to the signed-in user."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.database import get_db
from ouracoach.schemas.conversation import (
    ConversationCreate,
    ConversationRead,
    ConversationUpdate,
)
from ouracoach.storage import (
    ConversationAccessError,
    ConversationNotFoundError,
    create_conversation,
    delete_conversation,
    get_owned_conversation,
    list_conversations,
    update_conversation_title,
)

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


async def _load_owned(
    session: AsyncSession, conversation_id: int, user: CurrentUser
) -> ConversationRead:
    try:
        return await get_owned_conversation(session, conversation_id, user.id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found") from None
    except ConversationAccessError:
        raise HTTPException(status_code=403, detail="Forbidden") from None


@router.get("", response_model=list[ConversationRead])
async def get_conversations(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[ConversationRead]:
    """List the user's conversations, newest first (messages omitted)."""
    return await list_conversations(session, user.id)


@router.post("", response_model=ConversationRead, status_code=201)
async def post_conversation(
    body: ConversationCreate,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ConversationRead:
    return await create_conversation(session, user.id, body.title)


@router.get("/{conversation_id}", response_model=ConversationRead)
async def get_conversation_detail(
    conversation_id: int,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ConversationRead:
    """Get a conversation with all of its messages."""
    return await _load_owned(session, conversation_id, user)


@router.patch("/{conversation_id}", response_model=ConversationRead)
async def patch_conversation(
    conversation_id: int,
    body: ConversationUpdate,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ConversationRead:
    conversation = await _load_owned(session, conversation_id, user)
    if body.title:
        await update_conversation_title(session, conversation_id, body.title)
        conversation.title = body.title
    return conversation


@router.delete("/{conversation_id}", status_code=204)
async def remove_conversation(
    conversation_id: int,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> None:
    """Delete a conversation and its messages."""
    await _load_owned(session, conversation_id, user)
    await delete_conversation(session, conversation_id)
