"""Per-user settings: Oura token and profile."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.api.deps import get_dashboard_cache, get_oura_client
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.dashboard.cache import TTLCache
from ouracoach.database import get_db
from ouracoach.schemas.user_settings import (
    OuraTokenSaved,
    OuraTokenStatus,
    OuraTokenUpdate,
    ProfileRead,
)
from ouracoach.sources.oura.client import OuraClient
from ouracoach.storage import get_oura_token, set_oura_token

router = APIRouter(prefix="/api/settings", tags=["settings"])
logger = logging.getLogger(__name__)


@router.post("/oura-token", response_model=OuraTokenSaved)
async def save_oura_token(
    body: OuraTokenUpdate,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_dashboard_cache),
) -> OuraTokenSaved:
    """Store the user's Oura personal access token.

    Cached dashboards were built with the previous token, so they are dropped.
    """
    await set_oura_token(session, user.id, body.oura_token)
    cache.clear_user(user.id)
    return OuraTokenSaved(success=True)


@router.get("/oura-token", response_model=OuraTokenStatus)
async def check_oura_token(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> OuraTokenStatus:
    token = await get_oura_token(session, user.id)
    return OuraTokenStatus(has_token=bool(token))


@router.get("/profile", response_model=ProfileRead)
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    oura: OuraClient = Depends(get_oura_client),
) -> ProfileRead:
    """Biological sex from Oura personal info; null if unavailable for any reason."""
    token = await get_oura_token(session, user.id)
    if not token:
        return ProfileRead(biological_sex=None)
    try:
        info = await oura.fetch_personal_info(token)
    except Exception:
        logger.warning("Failed to fetch Oura profile for user %s", user.id, exc_info=True)
        return ProfileRead(biological_sex=None)
    return ProfileRead(biological_sex=info.get("biological_sex") or None)
