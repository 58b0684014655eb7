"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str
    openai_api_key: str | None = None
    openai_transcription_model: str = "whisper-1"
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.2
    cors_allowed_origins: str = "*"
    history_days: int = 30
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


class CaptureSettings(BaseSettings):
    """Settings for the microphone capture client."""

    service_url: str = "http://localhost:8000"
    access_token: str | None = None
    api_key: str | None = None
    sample_rate: int = 16_000
    channels: int = 1

    model_config = SettingsConfigDict(
        env_prefix="MEAL_LEDGER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if value:
            origins.append(value)
    return origins or ["*"]
