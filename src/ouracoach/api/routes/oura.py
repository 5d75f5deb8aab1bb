"""Raw Oura context, as the coach sees it."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.api.deps import get_oura_client
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.coaching.context import get_oura_summary_for_yesterday
from ouracoach.database import get_db
from ouracoach.schemas.dashboard import YesterdaySummary
from ouracoach.sources.oura.client import OuraAPIError, OuraClient
from ouracoach.storage import get_oura_token

router = APIRouter(prefix="/api/oura", tags=["oura"])
logger = logging.getLogger(__name__)


@router.get("/yesterday", response_model=YesterdaySummary)
async def get_yesterday_summary(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    oura: OuraClient = Depends(get_oura_client),
) -> dict[str, object]:
    """Yesterday's sleep and readiness scores with contributors."""
    token = await get_oura_token(session, user.id)
    if not token:
        raise HTTPException(status_code=400, detail="No Oura token configured")
    try:
        return await get_oura_summary_for_yesterday(oura, token)
    except OuraAPIError as e:
        logger.warning("Oura summary failed for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail=str(e)) from None
