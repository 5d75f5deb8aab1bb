from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from ouracoach.api.deps import get_app_settings
from ouracoach.config import Settings
from ouracoach.main import app
from ouracoach.sources.oura.client import OuraAPIError
from ouracoach.storage import set_oura_token


@pytest.fixture
async def with_token(session: AsyncSession) -> None:
    await set_oura_token(session, "u1", "oura-pat")


# ── GET /api/dashboard/today ──────────────────────────────────────────


class TestToday:
    async def test_requires_token(self, client: AsyncClient, oura: AsyncMock) -> None:
        response = await client.get("/api/dashboard/today")

        assert response.status_code == 400
        assert "No Oura token configured" in response.json()["detail"]
        oura.fetch_daily_sleep.assert_not_awaited()

    async def test_camel_case_payload(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        oura.fetch_daily_readiness.return_value = {"data": [{"score": 82}]}
        oura.fetch_daily_activity.return_value = {
            "data": [{"score": 90, "steps": 12000, "active_calories": 500}]
        }

        response = await client.get("/api/dashboard/today")

        assert response.status_code == 200
        body = response.json()
        assert body["readiness"]["score"] == 82
        assert body["activity"]["activeCalories"] == 500
        assert body["activity"]["totalCalories"] is None
        assert body["heartRate"] == {"samples": [], "latest": None}
        assert body["sleepDetails"] is None
        assert "X-Dashboard-Degraded" not in response.headers

    async def test_degraded_header(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        oura.fetch_daily_spo2.side_effect = OuraAPIError(404, "no sensor")
        oura.fetch_daily_stress.side_effect = OuraAPIError(500, "oops")

        response = await client.get("/api/dashboard/today")

        assert response.status_code == 200
        assert response.json()["spo2"] == {"average": None}
        assert response.headers["X-Dashboard-Degraded"] == "spo2=error,stress=error"

    async def test_rejected_token_reported(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        oura.fetch_daily_sleep.side_effect = OuraAPIError(401, "expired")

        response = await client.get("/api/dashboard/today")

        assert response.status_code == 200
        assert "sleep=unauthorized" in response.headers["X-Dashboard-Degraded"]

    async def test_cached_between_requests(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        first = await client.get("/api/dashboard/today")
        second = await client.get("/api/dashboard/today")

        assert first.content == second.content
        assert oura.fetch_daily_sleep.await_count == 1

    async def test_ttl_read_from_app_settings(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        app.dependency_overrides[get_app_settings] = lambda: Settings(
            dashboard_today_ttl_seconds=0
        )
        try:
            with patch("ouracoach.config.Settings") as settings_cls:
                await client.get("/api/dashboard/today")
                await client.get("/api/dashboard/today")
        finally:
            app.dependency_overrides.pop(get_app_settings, None)

        # TTL 0 means nothing survives to the second request
        assert oura.fetch_daily_sleep.await_count == 2
        settings_cls.assert_not_called()

    async def test_mapping_failure_is_500(
        self, client: AsyncClient, oura: AsyncMock, with_token: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def explode(*args: object, **kwargs: object) -> None:
            raise KeyError("boom")

        monkeypatch.setattr("ouracoach.dashboard.aggregator.map_today", explode)

        response = await client.get("/api/dashboard/today")

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch dashboard data"}


# ── GET /api/dashboard/week ───────────────────────────────────────────


class TestWeek:
    async def test_requires_token(self, client: AsyncClient, oura: AsyncMock) -> None:
        response = await client.get("/api/dashboard/week")
        assert response.status_code == 400

    async def test_week_payload(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        oura.fetch_daily_sleep_range.return_value = {
            "data": [{"day": "2025-01-14", "score": 70}, {"day": "2025-01-15", "score": 75}]
        }

        response = await client.get("/api/dashboard/week")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"startDate", "endDate", "sleep", "readiness", "activity", "sleepDetails"}
        assert body["sleep"] == [
            {"day": "2025-01-14", "score": 70},
            {"day": "2025-01-15", "score": 75},
        ]
        assert body["readiness"] == []


# ── POST /api/dashboard/sync ──────────────────────────────────────────


class TestSync:
    async def test_sync_forces_refetch(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        await client.get("/api/dashboard/today")

        response = await client.post("/api/dashboard/sync")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        await client.get("/api/dashboard/today")
        assert oura.fetch_daily_sleep.await_count == 2

    async def test_saving_token_clears_cache(
        self, client: AsyncClient, oura: AsyncMock, with_token: None
    ) -> None:
        await client.get("/api/dashboard/today")
        await client.post("/api/settings/oura-token", json={"ouraToken": "new-pat"})
        await client.get("/api/dashboard/today")

        assert oura.fetch_daily_sleep.await_count == 2
        assert oura.fetch_daily_sleep.call_args.args[1] == "new-pat"


# ── GET /api/oura/yesterday ───────────────────────────────────────────


class TestYesterday:
    async def test_requires_token(self, client: AsyncClient, oura: AsyncMock) -> None:
        response = await client.get("/api/oura/yesterday")
        assert response.status_code == 400

    async def test_summary(self, client: AsyncClient, oura: AsyncMock, with_token: None) -> None:
        oura.fetch_daily_sleep.return_value = {"data": [{"score": 81, "contributors": {"timing": 60}}]}

        response = await client.get("/api/oura/yesterday")

        assert response.status_code == 200
        body = response.json()
        assert body["sleep"] == {"score": 81, "contributors": {"timing": 60}}
        assert body["readiness"] == {"score": None, "contributors": None}

    async def test_vendor_error(self, client: AsyncClient, oura: AsyncMock, with_token: None) -> None:
        oura.fetch_daily_readiness.side_effect = OuraAPIError(401, "expired")

        response = await client.get("/api/oura/yesterday")

        assert response.status_code == 502
