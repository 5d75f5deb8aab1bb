"""Dashboard endpoints: today, trailing week, and cache sync."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ouracoach.api.deps import get_dashboard_aggregator
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.dashboard.aggregator import (
    DashboardAggregator,
    DashboardResult,
    MissingVendorTokenError,
)
from ouracoach.schemas.dashboard import DashboardSnapshot, DashboardWeek, SyncResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
logger = logging.getLogger(__name__)

DEGRADED_HEADER = "X-Dashboard-Degraded"


def _report_degraded(response: Response, result: DashboardResult) -> None:
    if result.degraded:
        response.headers[DEGRADED_HEADER] = ",".join(
            f"{category}={reason}" for category, reason in sorted(result.degraded.items())
        )


@router.get("/today", response_model=DashboardSnapshot)
async def get_today_dashboard(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
) -> DashboardSnapshot:
    """Today's scores, heart rate and last night's sleep.

    Categories the vendor could not deliver are null and listed in the
    X-Dashboard-Degraded header.
    """
    try:
        result = await aggregator.get_today(user.id)
    except MissingVendorTokenError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except Exception:
        logger.exception("Dashboard error for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data") from None
    _report_degraded(response, result)
    return result.payload  # type: ignore[return-value]


@router.get("/week", response_model=DashboardWeek)
async def get_week_dashboard(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
) -> DashboardWeek:
    """Per-day scores and sleep stats for the trailing 7 days."""
    try:
        result = await aggregator.get_week(user.id)
    except MissingVendorTokenError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except Exception:
        logger.exception("Week dashboard error for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to fetch week data") from None
    _report_degraded(response, result)
    return result.payload  # type: ignore[return-value]


@router.post("/sync", response_model=SyncResponse)
async def sync_dashboard(
    user: CurrentUser = Depends(get_current_user),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
) -> SyncResponse:
    """Drop the caller's cached dashboards so the next read hits Oura."""
    aggregator.sync(user.id)
    return SyncResponse(success=True)
