"""FastAPI dependencies wiring services to the request."""

from collections.abc import AsyncIterator
from functools import partial

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.coaching.coach import CoachService
from ouracoach.config import Settings
from ouracoach.dashboard.aggregator import DashboardAggregator
from ouracoach.dashboard.cache import TTLCache
from ouracoach.database import get_db
from ouracoach.sources.oura.client import OuraClient
from ouracoach.speech.transcription import Transcriber
from ouracoach.speech.transcription import get_transcriber as build_transcriber
from ouracoach.storage import get_oura_token
from ouracoach.voice.pipeline import VoicePipeline


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def get_dashboard_cache(request: Request) -> TTLCache:
    return request.app.state.dashboard_cache  # type: ignore[no-any-return]


async def get_oura_client() -> AsyncIterator[OuraClient]:
    async with OuraClient() as client:
        yield client


def get_dashboard_aggregator(
    session: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_dashboard_cache),
    oura: OuraClient = Depends(get_oura_client),
    settings: Settings = Depends(get_app_settings),
) -> DashboardAggregator:
    return DashboardAggregator(
        cache=cache,
        oura=oura,
        token_lookup=partial(get_oura_token, session),
        today_ttl=settings.dashboard_today_ttl_seconds,
        week_ttl=settings.dashboard_week_ttl_seconds,
    )


def get_coach_service() -> CoachService:
    return CoachService()


def get_transcriber() -> Transcriber:
    return build_transcriber()


def get_voice_pipeline(
    transcriber: Transcriber = Depends(get_transcriber),
    coach: CoachService = Depends(get_coach_service),
    oura: OuraClient = Depends(get_oura_client),
) -> VoicePipeline:
    return VoicePipeline(transcriber=transcriber, coach=coach, oura=oura)
