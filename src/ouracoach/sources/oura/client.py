"""Oura v2 REST API client, one method per data category."""

import logging
from datetime import date
from types import TracebackType
from typing import Any

import httpx

from ouracoach.config import get_settings

logger = logging.getLogger(__name__)


class OuraAPIError(Exception):
    """Raised when the Oura API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Oura error {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body

    @property
    def is_unauthorized(self) -> bool:
        # 403 is per category (no access to that data type), not a rejected token
        return self.status_code == 401


class OuraClient:
    """Issues authenticated GET requests against the Oura usercollection API.

    Every method takes the user's personal access token, so one client can be
    shared across users.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.oura_base_url).rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.oura_timeout_seconds)
        )

    async def __aenter__(self) -> "OuraClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get(self, path: str, params: dict[str, str], token: str) -> dict[str, Any]:
        response = await self._http.get(
            f"{self.base_url}/{path}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
        )
        if not response.is_success:
            logger.debug("Oura %s failed with HTTP %d", path, response.status_code)
            raise OuraAPIError(response.status_code, response.text)
        return response.json()  # type: ignore[no-any-return]

    async def _get_days(
        self, path: str, start: date, end: date, token: str
    ) -> dict[str, Any]:
        return await self._get(
            path, {"start_date": start.isoformat(), "end_date": end.isoformat()}, token
        )

    async def fetch_personal_info(self, token: str) -> dict[str, Any]:
        """Get age, weight, height, biological sex and email."""
        return await self._get("personal_info", {}, token)

    async def fetch_daily_sleep(self, day: date, token: str) -> dict[str, Any]:
        """Get the daily sleep score and contributors."""
        return await self._get_days("daily_sleep", day, day, token)

    async def fetch_daily_readiness(self, day: date, token: str) -> dict[str, Any]:
        """Get the daily readiness score and contributors."""
        return await self._get_days("daily_readiness", day, day, token)

    async def fetch_daily_activity(self, day: date, token: str) -> dict[str, Any]:
        """Get activity score, steps and calories for a day."""
        return await self._get_days("daily_activity", day, day, token)

    async def fetch_daily_stress(self, day: date, token: str) -> dict[str, Any]:
        """Get stress/recovery minutes and the day summary."""
        return await self._get_days("daily_stress", day, day, token)

    async def fetch_daily_spo2(self, day: date, token: str) -> dict[str, Any]:
        """Get the average blood oxygen for a day."""
        return await self._get_days("daily_spo2", day, day, token)

    async def fetch_heart_rate(self, start: date, end: date, token: str) -> dict[str, Any]:
        """Get heart rate samples between the start of `start` and the end of `end` (UTC)."""
        return await self._get(
            "heartrate",
            {
                "start_datetime": f"{start.isoformat()}T00:00:00+00:00",
                "end_datetime": f"{end.isoformat()}T23:59:59+00:00",
            },
            token,
        )

    async def fetch_sleep_periods(self, start: date, end: date, token: str) -> dict[str, Any]:
        """Get detailed sleep periods (stages, HR, HRV, efficiency)."""
        return await self._get_days("sleep", start, end, token)

    async def fetch_daily_sleep_range(self, start: date, end: date, token: str) -> dict[str, Any]:
        return await self._get_days("daily_sleep", start, end, token)

    async def fetch_daily_readiness_range(
        self, start: date, end: date, token: str
    ) -> dict[str, Any]:
        return await self._get_days("daily_readiness", start, end, token)

    async def fetch_daily_activity_range(
        self, start: date, end: date, token: str
    ) -> dict[str, Any]:
        return await self._get_days("daily_activity", start, end, token)
