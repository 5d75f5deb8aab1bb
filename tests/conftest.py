from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ouracoach.api.deps import get_oura_client
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.database import Base, get_db
from ouracoach.main import app
from ouracoach.sources.oura.client import OuraClient

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session = async_sessionmaker(test_engine, expire_on_commit=False)

TEST_USER = CurrentUser(id="u1", email="u1@example.com", name="Test")


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


async def override_get_current_user() -> CurrentUser:
    return TEST_USER


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_current_user] = override_get_current_user


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def reset_dashboard_cache() -> None:
    app.state.dashboard_cache.clear()


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as s:
        yield s


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def oura() -> Iterator[AsyncMock]:
    """Replace the Oura client dependency; every fetch returns an empty collection."""
    fake = AsyncMock(spec=OuraClient)
    for name in (
        "fetch_daily_sleep",
        "fetch_daily_readiness",
        "fetch_daily_activity",
        "fetch_daily_stress",
        "fetch_daily_spo2",
        "fetch_heart_rate",
        "fetch_sleep_periods",
        "fetch_daily_sleep_range",
        "fetch_daily_readiness_range",
        "fetch_daily_activity_range",
    ):
        getattr(fake, name).return_value = {"data": [], "next_token": None}

    async def override_get_oura_client() -> AsyncGenerator[OuraClient, None]:
        yield fake

    app.dependency_overrides[get_oura_client] = override_get_oura_client
    yield fake
    app.dependency_overrides.pop(get_oura_client, None)
