"""Tests for ElevenLabs text-to-speech."""

import json
from unittest.mock import patch

import httpx
import pytest

from ouracoach.config import Settings
from ouracoach.speech.tts import VOICES, TTSError, list_voices, resolve_voice, synthesize_speech


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"elevenlabs_api_key": "el-key", "default_voice": "rachel"}
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class TestVoices:
    def test_known_voice(self) -> None:
        assert resolve_voice("josh") == "josh"

    def test_unknown_voice_falls_back(self) -> None:
        with patch("ouracoach.speech.tts.get_settings", return_value=_settings()):
            assert resolve_voice("gandalf") == "rachel"
            assert resolve_voice(None) == "rachel"

    def test_bad_default_voice_falls_back_to_rachel(self) -> None:
        with patch("ouracoach.speech.tts.get_settings", return_value=_settings(default_voice="x")):
            assert resolve_voice("gandalf") == "rachel"

    def test_list_voices(self) -> None:
        voices = list_voices()
        assert len(voices) == len(VOICES)
        rachel = next(v for v in voices if v["name"] == "rachel")
        assert rachel == {
            "name": "rachel",
            "id": "21m00Tcm4TlvDq8ikWAM",
            "description": "Calm, warm female",
        }


class TestSynthesizeSpeech:
    async def test_posts_to_voice_endpoint(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=b"ID3mp3bytes")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("ouracoach.speech.tts.get_settings", return_value=_settings()):
            audio = await synthesize_speech("Good morning", "adam", http_client=http)

        assert audio == b"ID3mp3bytes"
        request = requests[0]
        assert request.url.path == "/v1/text-to-speech/pNInz6obpgDQGcFmaJgB"
        assert request.headers["xi-api-key"] == "el-key"
        payload = json.loads(request.content)
        assert payload["text"] == "Good morning"
        assert payload["model_id"] == "eleven_turbo_v2_5"
        assert payload["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.75}

    async def test_missing_key(self) -> None:
        with patch(
            "ouracoach.speech.tts.get_settings", return_value=_settings(elevenlabs_api_key="")
        ):
            with pytest.raises(TTSError, match="not configured"):
                await synthesize_speech("Hi")

    async def test_vendor_error(self) -> None:
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(429, text="quota exceeded"))
        )
        with patch("ouracoach.speech.tts.get_settings", return_value=_settings()):
            with pytest.raises(TTSError) as exc_info:
                await synthesize_speech("Hi", http_client=http)

        assert exc_info.value.status_code == 429

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("ouracoach.speech.tts.get_settings", return_value=_settings()):
            with pytest.raises(TTSError, match="request failed"):
                await synthesize_speech("Hi", http_client=http)
