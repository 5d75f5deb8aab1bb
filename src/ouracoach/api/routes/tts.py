"""Text-to-speech endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.schemas.voice import TTSRequest, VoiceInfo
from ouracoach.speech.tts import TTSError, list_voices, synthesize_speech

router = APIRouter(prefix="/api/tts", tags=["tts"])
logger = logging.getLogger(__name__)


@router.post("", response_class=Response)
async def text_to_speech(
    body: TTSRequest,
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    """Render text as MP3. Unknown voices fall back to the default preset."""
    try:
        audio = await synthesize_speech(body.text, body.voice)
    except TTSError as e:
        logger.error("TTS failed for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail=str(e)) from None
    return Response(content=audio, media_type="audio/mpeg")


@router.get("/voices", response_model=list[VoiceInfo])
async def get_voices(user: CurrentUser = Depends(get_current_user)) -> list[dict[str, str]]:
    return list_voices()
