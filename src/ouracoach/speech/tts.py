"""ElevenLabs text-to-speech."""

import logging

import httpx

from ouracoach.config import get_settings

logger = logging.getLogger(__name__)

# name -> (ElevenLabs voice id, description)
VOICES: dict[str, tuple[str, str]] = {
    "rachel": ("21m00Tcm4TlvDq8ikWAM", "Calm, warm female"),
    "drew": ("29vD33N1CtxCmqQRPOHJ", "Confident male"),
    "clyde": ("2EiwWnXFnvU5JabPnv8n", "Middle-aged male, warm"),
    "paul": ("5Q0t7uMcjvnagumLfvZi", "News anchor style"),
    "domi": ("AZnzlk1XvdvUeBnXmlld", "Young female, energetic"),
    "dave": ("CYw3kZ02Hs0563khs1Fj", "British male, conversational"),
    "fin": ("D38z5RcWu1voky8WS1ja", "Irish male, friendly"),
    "sarah": ("EXAVITQu4vr4xnSDxMaL", "Soft female"),
    "antoni": ("ErXwobaYiN019PkySvjV", "Young male, friendly"),
    "josh": ("TxGEqnHWrfWFTfGW9XjX", "Deep male"),
    "arnold": ("VR6AewLTigWG4xSOukaG", "Crisp male"),
    "adam": ("pNInz6obpgDQGcFmaJgB", "Deep male, narration"),
    "sam": ("yoZ06aMxZJJ28mfd3POQ", "Young male, dynamic"),
}

FALLBACK_VOICE = "rachel"
REQUEST_TIMEOUT = 30.0


class TTSError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def resolve_voice(name: str | None) -> str:
    """Map a preset name to a known preset, falling back to the default voice."""
    if name and name in VOICES:
        return name
    default = get_settings().default_voice
    return default if default in VOICES else FALLBACK_VOICE


def list_voices() -> list[dict[str, str]]:
    return [
        {"name": name, "id": voice_id, "description": description}
        for name, (voice_id, description) in VOICES.items()
    ]


async def synthesize_speech(
    text: str,
    voice: str | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> bytes:
    """Render `text` as MP3 audio with the given voice preset.

    Raises:
        TTSError: If no API key is configured or ElevenLabs rejects the request.
    """
    settings = get_settings()
    if not settings.elevenlabs_api_key:
        raise TTSError("ElevenLabs API key is not configured")

    voice_name = resolve_voice(voice)
    voice_id = VOICES[voice_name][0]

    client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(REQUEST_TIMEOUT))
    try:
        response = await client.post(
            f"{settings.elevenlabs_base_url}/text-to-speech/{voice_id}",
            headers={
                "xi-api-key": settings.elevenlabs_api_key,
                "Content-Type": "application/json",
                "Accept": "audio/mpeg",
            },
            json={
                "text": text,
                "model_id": settings.elevenlabs_model,
                "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
            },
        )
    except httpx.HTTPError as e:
        raise TTSError(f"ElevenLabs request failed: {e}") from e
    finally:
        if http_client is None:
            await client.aclose()

    if not response.is_success:
        raise TTSError(
            f"ElevenLabs error {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    logger.info("Synthesized %d chars with voice %s", len(text), voice_name)
    return response.content
