"""Voice coach: replies to transcripts and names new conversations."""

import logging
from typing import Any

from ouracoach.coaching.llm_client import LLMClient
from ouracoach.coaching.prompt_builder import (
    build_coach_messages,
    build_coach_system_prompt,
    build_title_message,
    get_title_system_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New conversation"
MAX_TITLE_LENGTH = 50
REPLY_MAX_TOKENS = 300
TITLE_MAX_TOKENS = 30


class CoachError(RuntimeError):
    """The coach could not produce a reply."""


def truncate_title(title: str) -> str:
    if len(title) > MAX_TITLE_LENGTH:
        return title[: MAX_TITLE_LENGTH - 3] + "..."
    return title


class CoachService:
    def __init__(self, llm_client: LLMClient | None = None) -> None:
        self._llm = llm_client or LLMClient()

    async def reply(
        self,
        transcript: str,
        oura_context: dict[str, Any] | None = None,
        history: list[dict[str, str]] | None = None,
        username: str | None = None,
    ) -> str:
        """Answer the user's transcript, continuing the given conversation history."""
        if not self._llm.configured:
            raise CoachError("Claude API key is not configured")

        try:
            response = await self._llm.call(
                system=build_coach_system_prompt(username, oura_context),
                messages=build_coach_messages(transcript, history),
                model=self._llm.coach_model,
                max_tokens=REPLY_MAX_TOKENS,
            )
        except Exception as e:
            logger.error("Coach reply failed: %s", e)
            raise CoachError(f"Coach reply failed: {e}") from e
        return response.content.strip()

    async def generate_title(self, user_message: str, assistant_reply: str) -> str:
        """Name a conversation from its first exchange. Never raises."""
        try:
            response = await self._llm.call(
                system=get_title_system_prompt(),
                messages=[
                    {"role": "user", "content": build_title_message(user_message, assistant_reply)}
                ],
                model=self._llm.title_model,
                max_tokens=TITLE_MAX_TOKENS,
            )
        except Exception:
            logger.warning("Title generation failed, using default", exc_info=True)
            return DEFAULT_TITLE

        title = response.content.strip()
        return truncate_title(title) if title else DEFAULT_TITLE
