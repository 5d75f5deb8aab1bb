import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

import ouracoach.models  # noqa: F401  registers models with Base.metadata
from ouracoach.api.routes.conversations import router as conversations_router
from ouracoach.api.routes.dashboard import router as dashboard_router
from ouracoach.api.routes.oura import router as oura_router
from ouracoach.api.routes.settings import router as settings_router
from ouracoach.api.routes.tts import router as tts_router
from ouracoach.api.routes.voice import router as voice_router
from ouracoach.auth import CurrentUser, get_current_user
from ouracoach.config import get_settings
from ouracoach.dashboard.cache import TTLCache
from ouracoach.database import Base, engine
from ouracoach.schemas.system import EnvCheckResponse, SessionUser, StatusResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Create tables on startup (no migrations yet)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="OuraCoach",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.dashboard_cache = TTLCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Dashboard-Degraded"],
    )

    app.include_router(conversations_router)
    app.include_router(dashboard_router)
    app.include_router(oura_router)
    app.include_router(settings_router)
    app.include_router(tts_router)
    app.include_router(voice_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> StatusResponse:
        return StatusResponse(status="ok")

    @app.get("/api/system/env-check", response_model=EnvCheckResponse)
    async def env_check() -> EnvCheckResponse:
        return EnvCheckResponse(
            has_claude=bool(settings.claude_api_key),
            has_openai=bool(settings.openai_api_key),
            has_eleven_labs=bool(settings.elevenlabs_api_key),
        )

    @app.get("/api/auth/session", response_model=SessionUser)
    async def current_session(user: CurrentUser = Depends(get_current_user)) -> SessionUser:
        return SessionUser(id=user.id, email=user.email, name=user.name)

    return app


app = create_app()
