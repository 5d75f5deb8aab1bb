"""Voice coaching pipeline: audio in, coach reply (and optionally audio) out."""

import base64
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.auth import CurrentUser
from ouracoach.coaching.coach import DEFAULT_TITLE, CoachService
from ouracoach.coaching.context import get_oura_summary_for_yesterday
from ouracoach.schemas.voice import QuickReply, VoiceReply
from ouracoach.sources.oura.client import OuraClient
from ouracoach.speech.transcription import Transcriber
from ouracoach.speech.tts import synthesize_speech
from ouracoach.storage import (
    add_message,
    create_conversation,
    get_oura_token,
    get_owned_conversation,
    update_conversation_title,
)

logger = logging.getLogger(__name__)

Synthesizer = Callable[[str, str | None], Awaitable[bytes]]


@dataclass
class AudioUpload:
    content: bytes
    filename: str = "audio.webm"
    content_type: str = "audio/webm"


class VoicePipeline:
    def __init__(
        self,
        transcriber: Transcriber,
        coach: CoachService,
        oura: OuraClient,
        synthesizer: Synthesizer = synthesize_speech,
    ) -> None:
        self._transcriber = transcriber
        self._coach = coach
        self._oura = oura
        self._synthesize = synthesizer

    async def _oura_context(
        self, session: AsyncSession, user_id: str, today: date | None = None
    ) -> dict[str, Any] | None:
        """Yesterday's scores if the user has a token; None on any vendor failure."""
        token = await get_oura_token(session, user_id)
        if not token:
            return None
        try:
            return await get_oura_summary_for_yesterday(self._oura, token, today)
        except Exception:
            logger.warning("Oura context unavailable for user %s", user_id, exc_info=True)
            return None

    async def _speak(self, text: str, voice: str) -> str | None:
        try:
            audio = await self._synthesize(text, voice)
        except Exception:
            logger.warning("Speech synthesis failed, returning text only", exc_info=True)
            return None
        return base64.b64encode(audio).decode("ascii")

    async def transcribe_and_reply(
        self,
        session: AsyncSession,
        user: CurrentUser,
        audio: AudioUpload,
        conversation_id: int | None = None,
        voice: str | None = None,
    ) -> VoiceReply:
        """Answer a recorded question and append the exchange to a conversation.

        Without `conversation_id` a new conversation is started and titled from
        its first exchange.

        Raises:
            ConversationNotFoundError / ConversationAccessError: Bad conversation id.
            TranscriptionError: The audio produced no text.
            CoachError: Claude did not answer.
        """
        is_new = conversation_id is None
        if conversation_id is None:
            conversation = await create_conversation(session, user.id, DEFAULT_TITLE)
            history: list[dict[str, str]] = []
        else:
            conversation = await get_owned_conversation(session, conversation_id, user.id)
            history = [{"role": m.role, "content": m.content} for m in conversation.messages]

        transcript = await self._transcriber.transcribe(
            audio.content, audio.filename, audio.content_type
        )
        oura_context = await self._oura_context(session, user.id)
        reply = await self._coach.reply(
            transcript, oura_context=oura_context, history=history, username=user.name
        )

        await add_message(session, conversation.id, "user", transcript)
        await add_message(session, conversation.id, "assistant", reply)

        title = conversation.title
        if is_new:
            title = await self._coach.generate_title(transcript, reply)
            await update_conversation_title(session, conversation.id, title)

        return VoiceReply(
            transcript=transcript,
            reply=reply,
            conversation_id=conversation.id,
            conversation_title=title,
            is_new_conversation=is_new,
            audio=await self._speak(reply, voice) if voice else None,
        )

    async def quick(
        self, session: AsyncSession, user: CurrentUser, audio: AudioUpload
    ) -> QuickReply:
        """Answer a recorded question without saving anything."""
        transcript = await self._transcriber.transcribe(
            audio.content, audio.filename, audio.content_type
        )
        oura_context = await self._oura_context(session, user.id)
        reply = await self._coach.reply(transcript, oura_context=oura_context, username=user.name)
        return QuickReply(transcript=transcript, reply=reply)
