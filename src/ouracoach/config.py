from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OURACOACH_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:5174"]
    )

    # Database
    db_url: str = "sqlite+aiosqlite:///./ouracoach.db"

    # Session tokens issued by the auth provider
    session_secret: str = "change-me"
    session_algorithm: str = "HS256"
    session_cookie_name: str = "ouracoach_session"

    # Oura
    oura_base_url: str = "https://api.ouraring.com/v2/usercollection"
    oura_timeout_seconds: float = 15.0

    # Dashboard cache
    dashboard_today_ttl_seconds: int = 5 * 60
    dashboard_week_ttl_seconds: int = 30 * 60

    # Claude API
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-5"
    claude_title_model: str = "claude-sonnet-4-5"

    # Speech-to-text
    openai_api_key: str = ""
    whisper_backend: str = "openai"  # openai, whisper_cpp
    whisper_model: str = "whisper-1"
    whisper_cpp_binary: str = "whisper-cli"
    whisper_cpp_model_path: str = "models/ggml-base.en.bin"
    ffmpeg_binary: str = "ffmpeg"

    # Text-to-speech
    elevenlabs_api_key: str = ""
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_model: str = "eleven_turbo_v2_5"
    default_voice: str = "rachel"


def get_settings() -> Settings:
    return Settings()
