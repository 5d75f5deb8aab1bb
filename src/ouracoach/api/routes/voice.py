"""Voice coaching: upload audio, get the coach's reply."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.api.deps import get_voice_pipeline
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.coaching.coach import CoachError
from ouracoach.database import get_db
from ouracoach.schemas.voice import QuickReply, VoiceReply
from ouracoach.speech.transcription import TranscriptionError
from ouracoach.storage import ConversationAccessError, ConversationNotFoundError
from ouracoach.voice.pipeline import AudioUpload, VoicePipeline

router = APIRouter(prefix="/api/voice", tags=["voice"])
logger = logging.getLogger(__name__)


async def _read_upload(audio: UploadFile) -> AudioUpload:
    content = await audio.read()
    if not content:
        raise HTTPException(status_code=400, detail="Missing audio file field: audio")
    return AudioUpload(
        content=content,
        filename=audio.filename or "audio.webm",
        content_type=audio.content_type or "audio/webm",
    )


@router.post("/transcribe-and-reply", response_model=VoiceReply)
async def transcribe_and_reply(
    audio: UploadFile = File(...),
    conversation_id: int | None = Form(default=None, alias="conversationId"),
    voice: str | None = Form(default=None),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    pipeline: VoicePipeline = Depends(get_voice_pipeline),
) -> VoiceReply:
    """Transcribe a recording, answer it, and save both turns to a conversation.

    Without conversationId a new, auto-titled conversation is created. With
    `voice` the reply is also returned as base64 MP3 audio.
    """
    upload = await _read_upload(audio)
    try:
        return await pipeline.transcribe_and_reply(
            session, user, upload, conversation_id=conversation_id, voice=voice
        )
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found") from None
    except ConversationAccessError:
        raise HTTPException(status_code=403, detail="Forbidden") from None
    except TranscriptionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    except CoachError as e:
        raise HTTPException(status_code=502, detail=str(e)) from None


@router.post("/quick", response_model=QuickReply)
async def quick_reply(
    audio: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    pipeline: VoicePipeline = Depends(get_voice_pipeline),
) -> QuickReply:
    """Transcribe and answer without saving to a conversation."""
    upload = await _read_upload(audio)
    try:
        return await pipeline.quick(session, user, upload)
    except TranscriptionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    except CoachError as e:
        raise HTTPException(status_code=502, detail=str(e)) from None
