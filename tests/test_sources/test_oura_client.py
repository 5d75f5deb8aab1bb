"""Tests for the Oura v2 client against a mocked transport."""

from datetime import date

import httpx
import pytest

from ouracoach.sources.oura.client import OuraAPIError, OuraClient

BASE_URL = "https://api.ouraring.com/v2/usercollection"


def _client(handler: object, requests: list[httpx.Request]) -> OuraClient:
    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)  # type: ignore[operator]

    http = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return OuraClient(http_client=http, base_url=BASE_URL)


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"data": [{"day": "2025-01-15", "score": 80}], "next_token": None})


class TestRequests:
    async def test_daily_sleep_sends_bearer_and_dates(self) -> None:
        requests: list[httpx.Request] = []
        oura = _client(_ok, requests)

        body = await oura.fetch_daily_sleep(date(2025, 1, 15), "pat-123")

        assert body["data"][0]["score"] == 80
        request = requests[0]
        assert request.method == "GET"
        assert request.url.path == "/v2/usercollection/daily_sleep"
        assert request.url.params["start_date"] == "2025-01-15"
        assert request.url.params["end_date"] == "2025-01-15"
        assert request.headers["Authorization"] == "Bearer pat-123"

    async def test_heart_rate_uses_datetime_window(self) -> None:
        requests: list[httpx.Request] = []
        oura = _client(_ok, requests)

        await oura.fetch_heart_rate(date(2025, 1, 15), date(2025, 1, 15), "pat")

        params = requests[0].url.params
        assert requests[0].url.path.endswith("/heartrate")
        assert params["start_datetime"] == "2025-01-15T00:00:00+00:00"
        assert params["end_datetime"] == "2025-01-15T23:59:59+00:00"

    async def test_range_endpoints(self) -> None:
        requests: list[httpx.Request] = []
        oura = _client(_ok, requests)
        start, end = date(2025, 1, 9), date(2025, 1, 15)

        await oura.fetch_daily_readiness_range(start, end, "pat")
        await oura.fetch_daily_activity_range(start, end, "pat")
        await oura.fetch_sleep_periods(start, end, "pat")

        assert [r.url.path.rsplit("/", 1)[-1] for r in requests] == [
            "daily_readiness",
            "daily_activity",
            "sleep",
        ]
        for request in requests:
            assert request.url.params["start_date"] == "2025-01-09"
            assert request.url.params["end_date"] == "2025-01-15"

    async def test_personal_info(self) -> None:
        requests: list[httpx.Request] = []
        oura = _client(
            lambda r: httpx.Response(200, json={"biological_sex": "female", "age": 34}), requests
        )

        info = await oura.fetch_personal_info("pat")

        assert info["biological_sex"] == "female"
        assert requests[0].url.path.endswith("/personal_info")


class TestErrors:
    async def test_unauthorized(self) -> None:
        oura = _client(lambda r: httpx.Response(401, text="invalid token"), [])

        with pytest.raises(OuraAPIError) as exc_info:
            await oura.fetch_daily_stress(date(2025, 1, 15), "bad")

        assert exc_info.value.status_code == 401
        assert exc_info.value.is_unauthorized
        assert "invalid token" in exc_info.value.body

    async def test_server_error_is_not_unauthorized(self) -> None:
        oura = _client(lambda r: httpx.Response(503, text="maintenance"), [])

        with pytest.raises(OuraAPIError) as exc_info:
            await oura.fetch_daily_spo2(date(2025, 1, 15), "pat")

        assert not exc_info.value.is_unauthorized

    async def test_forbidden_category_is_not_a_rejected_token(self) -> None:
        oura = _client(lambda r: httpx.Response(403, text="no access to spo2"), [])

        with pytest.raises(OuraAPIError) as exc_info:
            await oura.fetch_daily_spo2(date(2025, 1, 15), "pat")

        assert exc_info.value.status_code == 403
        assert not exc_info.value.is_unauthorized


class TestLifecycle:
    async def test_does_not_close_injected_client(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(_ok))
        async with OuraClient(http_client=http, base_url=BASE_URL):
            pass
        assert not http.is_closed
        await http.aclose()

    async def test_closes_own_client(self) -> None:
        oura = OuraClient(base_url=BASE_URL)
        async with oura:
            pass
        assert oura._http.is_closed
