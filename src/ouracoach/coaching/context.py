"""Gather wearable context for coaching prompts."""

import asyncio
from datetime import date, timedelta
from typing import Any

from ouracoach.dashboard.mappers import map_yesterday_summary
from ouracoach.sources.oura.client import OuraClient


async def get_oura_summary_for_yesterday(
    oura: OuraClient, token: str, today: date | None = None
) -> dict[str, Any]:
    """Fetch yesterday's sleep and readiness scores as a prompt-ready dict.

    Vendor errors propagate; callers decide whether missing context is fatal.
    """
    today = today or date.today()
    day = today - timedelta(days=1)

    sleep, readiness = await asyncio.gather(
        oura.fetch_daily_sleep(day, token),
        oura.fetch_daily_readiness(day, token),
    )
    summary = map_yesterday_summary(
        day,
        sleep=sleep.get("data") or [],
        readiness=readiness.get("data") or [],
    )
    return summary.model_dump()
