"""Speech-to-text backends: OpenAI Whisper API or a local whisper.cpp binary."""

import asyncio
import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from openai import AsyncOpenAI

from ouracoach.config import Settings, get_settings

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Audio could not be turned into text."""


class Transcriber(ABC):
    """Interface shared by all speech-to-text backends."""

    @property
    @abstractmethod
    def backend(self) -> str:
        """Identifier for this backend (e.g. 'openai', 'whisper_cpp')."""
        ...

    @abstractmethod
    async def _transcribe(self, audio: bytes, filename: str, content_type: str) -> str: ...

    async def transcribe(
        self, audio: bytes, filename: str = "audio.webm", content_type: str = "audio/webm"
    ) -> str:
        """Transcribe an uploaded recording.

        Raises:
            TranscriptionError: If the audio is empty or the backend produced no text.
        """
        if not audio:
            raise TranscriptionError("Empty audio upload")
        transcript = (await self._transcribe(audio, filename, content_type)).strip()
        if not transcript:
            raise TranscriptionError(f"Empty transcript ({self.backend} produced no text)")
        logger.info("Transcribed %d bytes with %s", len(audio), self.backend)
        return transcript


class OpenAITranscriber(Transcriber):
    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.whisper_model
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        if not self._api_key:
            raise TranscriptionError("OpenAI API key is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    @property
    def backend(self) -> str:
        return "openai"

    async def _transcribe(self, audio: bytes, filename: str, content_type: str) -> str:
        client = self.client
        try:
            response = await client.audio.transcriptions.create(
                file=(filename, audio, content_type),
                model=self._model,
                language="en",
            )
        except Exception as e:
            raise TranscriptionError(f"Whisper API transcription failed: {e}") from e
        return response.text


class WhisperCppTranscriber(Transcriber):
    """Runs ffmpeg to get 16 kHz mono WAV, then the whisper.cpp CLI on it."""

    def __init__(
        self,
        binary: str | None = None,
        model_path: str | None = None,
        ffmpeg: str | None = None,
    ) -> None:
        settings = get_settings()
        self._binary = binary or settings.whisper_cpp_binary
        self._model_path = model_path or settings.whisper_cpp_model_path
        self._ffmpeg = ffmpeg or settings.ffmpeg_binary

    @property
    def backend(self) -> str:
        return "whisper_cpp"

    async def _run(self, *args: str) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise TranscriptionError(f"Executable not found: {args[0]}") from e
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise TranscriptionError(
                f"{Path(args[0]).name} exited with {process.returncode}: "
                f"{stderr.decode(errors='replace')[:200]}"
            )
        return stdout.decode(errors="replace")

    async def _transcribe(self, audio: bytes, filename: str, content_type: str) -> str:
        suffix = Path(filename).suffix or ".webm"
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / f"input{suffix}"
            wav = Path(tmp) / "input.wav"
            source.write_bytes(audio)
            await self._run(
                self._ffmpeg, "-y", "-i", str(source), "-ar", "16000", "-ac", "1", str(wav)
            )
            output = await self._run(
                self._binary, "-m", self._model_path, "-f", str(wav), "-l", "en", "-nt"
            )
        return " ".join(line.strip() for line in output.splitlines() if line.strip())


def get_transcriber(settings: Settings | None = None) -> Transcriber:
    settings = settings or get_settings()
    if settings.whisper_backend == "whisper_cpp":
        return WhisperCppTranscriber()
    if settings.whisper_backend != "openai":
        logger.warning("Unknown whisper backend %r, using openai", settings.whisper_backend)
    return OpenAITranscriber()
