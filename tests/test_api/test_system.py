from unittest.mock import patch

from httpx import ASGITransport, AsyncClient

from ouracoach.config import Settings
from ouracoach.main import create_app


async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/api/system/status")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_env_check_reflects_settings() -> None:
    settings = Settings(claude_api_key="sk-ant", openai_api_key="", elevenlabs_api_key="el")
    with patch("ouracoach.main.get_settings", return_value=settings):
        app = create_app()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/system/env-check")

    assert response.status_code == 200
    assert response.json() == {"hasClaude": True, "hasOpenai": False, "hasElevenLabs": True}


async def test_session_returns_current_user(client: AsyncClient) -> None:
    response = await client.get("/api/auth/session")
    assert response.status_code == 200
    assert response.json() == {"id": "u1", "email": "u1@example.com", "name": "Test"}
