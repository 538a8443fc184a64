"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_timeout_seconds: int = 10
    openai_api_key: str | None = None
    openai_model: str = "gpt-5-mini"
    openai_store: bool = False
    estimation_timeout_seconds: float = 8.0
    estimate_cache_ttl_seconds: int = 3600
    default_timezone: str = "UTC"
    allowed_origins: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_origins(raw: str | None) -> list[str]:
    """Parse CORS origins from env; empty means none, "*" means any."""
    if raw is None:
        return []
    cleaned = raw.strip()
    if cleaned == "*":
        return ["*"]
    return [chunk.strip().rstrip("/") for chunk in cleaned.split(",") if chunk.strip()]
