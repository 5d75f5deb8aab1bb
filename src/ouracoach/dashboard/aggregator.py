"""Dashboard aggregation: parallel Oura fetches, per-category degradation, caching.

Each vendor call is isolated in a FetchResult so a failing category (no SpO2
sensor, a vendor hiccup) turns into nulls for that category only. Results are
cached per user and local day: 5 minutes for "today", 30 minutes for "week".
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from ouracoach.dashboard.cache import TTLCache
from ouracoach.dashboard.mappers import Record, map_today, map_week
from ouracoach.schemas.dashboard import DashboardSnapshot, DashboardWeek
from ouracoach.sources.oura.client import OuraAPIError, OuraClient

logger = logging.getLogger(__name__)

WEEK_DAYS = 7

DEGRADED_UNAUTHORIZED = "unauthorized"
DEGRADED_ERROR = "error"

TokenLookup = Callable[[str], Awaitable[str | None]]
Clock = Callable[[], datetime]


class MissingVendorTokenError(Exception):
    """The user has not saved an Oura personal access token."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            "No Oura token configured. Please add your Oura personal access token in settings."
        )
        self.user_id = user_id


@dataclass
class FetchResult:
    """Outcome of one vendor call: its records, or the reason it degraded."""

    category: str
    data: list[Record] = field(default_factory=list)
    degraded_reason: str | None = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None


@dataclass
class DashboardResult:
    payload: DashboardSnapshot | DashboardWeek
    degraded: dict[str, str] = field(default_factory=dict)

    @property
    def vendor_unauthorized(self) -> bool:
        return DEGRADED_UNAUTHORIZED in self.degraded.values()


async def fetch_category(category: str, call: Awaitable[dict[str, Any]]) -> FetchResult:
    """Await a vendor call, turning any failure into a degraded empty result."""
    try:
        body = await call
    except OuraAPIError as e:
        reason = DEGRADED_UNAUTHORIZED if e.is_unauthorized else DEGRADED_ERROR
        logger.warning("Oura %s degraded (%s): HTTP %d", category, reason, e.status_code)
        return FetchResult(category=category, degraded_reason=reason)
    except Exception:
        logger.warning("Oura %s degraded (error)", category, exc_info=True)
        return FetchResult(category=category, degraded_reason=DEGRADED_ERROR)

    data = body.get("data") if isinstance(body, dict) else None
    return FetchResult(category=category, data=data if isinstance(data, list) else [])


class DashboardAggregator:
    """Builds the today/week dashboards for a user from the Oura API."""

    def __init__(
        self,
        cache: TTLCache,
        oura: OuraClient,
        token_lookup: TokenLookup,
        clock: Clock = datetime.now,
        today_ttl: float = 5 * 60,
        week_ttl: float = 30 * 60,
    ) -> None:
        self._cache = cache
        self._oura = oura
        self._token_lookup = token_lookup
        self._clock = clock
        self.today_ttl = today_ttl
        self.week_ttl = week_ttl

    @staticmethod
    def cache_key(user_id: str, scope: str, anchor: date) -> str:
        return f"{user_id}:dashboard:{scope}:{anchor.isoformat()}"

    def today(self) -> date:
        return self._clock().date()

    async def _require_token(self, user_id: str) -> str:
        token = await self._token_lookup(user_id)
        if not token:
            raise MissingVendorTokenError(user_id)
        return token

    def _store(self, key: str, result: DashboardResult, ttl: float) -> None:
        # A rejected token would otherwise pin an all-null dashboard for the whole TTL
        if result.vendor_unauthorized:
            logger.warning("Not caching %s: Oura rejected the token", key)
            return
        self._cache.set(key, result, ttl)

    async def get_today(self, user_id: str) -> DashboardResult:
        token = await self._require_token(user_id)
        today = self.today()
        key = self.cache_key(user_id, "today", today)

        cached: DashboardResult | None = self._cache.get(key)
        if cached is not None:
            logger.debug("Dashboard cache hit: %s", key)
            return cached

        yesterday = today - timedelta(days=1)
        results = await asyncio.gather(
            fetch_category("sleep", self._oura.fetch_daily_sleep(today, token)),
            fetch_category("readiness", self._oura.fetch_daily_readiness(today, token)),
            fetch_category("activity", self._oura.fetch_daily_activity(today, token)),
            fetch_category("stress", self._oura.fetch_daily_stress(today, token)),
            fetch_category("spo2", self._oura.fetch_daily_spo2(today, token)),
            fetch_category("heart_rate", self._oura.fetch_heart_rate(today, today, token)),
            fetch_category(
                "sleep_periods", self._oura.fetch_sleep_periods(yesterday, today, token)
            ),
        )
        by_category = {r.category: r for r in results}

        payload = map_today(
            today,
            sleep=by_category["sleep"].data,
            readiness=by_category["readiness"].data,
            activity=by_category["activity"].data,
            stress=by_category["stress"].data,
            spo2=by_category["spo2"].data,
            heart_rate=by_category["heart_rate"].data,
            sleep_periods=by_category["sleep_periods"].data,
        )
        result = DashboardResult(payload=payload, degraded=_degraded(results))
        self._store(key, result, self.today_ttl)
        return result

    async def get_week(self, user_id: str) -> DashboardResult:
        token = await self._require_token(user_id)
        today = self.today()
        key = self.cache_key(user_id, "week", today)

        cached: DashboardResult | None = self._cache.get(key)
        if cached is not None:
            logger.debug("Dashboard cache hit: %s", key)
            return cached

        start = today - timedelta(days=WEEK_DAYS - 1)
        results = await asyncio.gather(
            fetch_category("sleep", self._oura.fetch_daily_sleep_range(start, today, token)),
            fetch_category(
                "readiness", self._oura.fetch_daily_readiness_range(start, today, token)
            ),
            fetch_category("activity", self._oura.fetch_daily_activity_range(start, today, token)),
            fetch_category("sleep_periods", self._oura.fetch_sleep_periods(start, today, token)),
        )
        by_category = {r.category: r for r in results}

        payload = map_week(
            start,
            today,
            sleep=by_category["sleep"].data,
            readiness=by_category["readiness"].data,
            activity=by_category["activity"].data,
            sleep_periods=by_category["sleep_periods"].data,
        )
        result = DashboardResult(payload=payload, degraded=_degraded(results))
        self._store(key, result, self.week_ttl)
        return result

    def sync(self, user_id: str) -> int:
        """Forget the user's cached dashboards so the next read refetches."""
        removed = self._cache.clear_user(user_id)
        logger.info("Cleared %d cached dashboard entries for user %s", removed, user_id)
        return removed


def _degraded(results: list[FetchResult] | tuple[FetchResult, ...]) -> dict[str, str]:
    return {r.category: r.degraded_reason for r in results if r.degraded_reason is not None}
