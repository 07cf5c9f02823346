"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Reference corpus database
    database_url: str | None = None

    # Generation client
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o"
    generation_timeout_sec: float = 60.0
    generation_max_tokens: int = 2000

    # Sampling temperatures
    draft_temperature: float = 0.7
    compare_temperature: float = 0.3

    # Retrieval
    reference_chunk_limit: int = 3

    # Uploads (bytes)
    max_upload_bytes: int = 20 * 1024 * 1024

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
