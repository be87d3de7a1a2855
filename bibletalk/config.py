"""Configuration management using Pydantic Settings.

Priority order:
1. Environment variables (highest priority)
2. Google Cloud Secret Manager (for the OpenAI API key, when GOOGLE_PROJECT_ID is set)
3. .env file (for local development fallback)
"""

from functools import lru_cache
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_secret_value(project_id: str, environment: str) -> str | None:
    """Lazy import so the Google client is only loaded when a project is configured."""
    from bibletalk.secret_manager import fetch_openai_api_key

    return fetch_openai_api_key(project_id, environment)


class Settings(BaseSettings):
    """Application settings with Secret Manager integration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "dev"
    google_project_id: str | None = None

    # OpenAI
    openai_api_key: str = ""
    request_timeout: float = 120.0  # seconds, image generation is slow

    # Moderation
    moderation_model: str = "omni-moderation-latest"

    # Discussion generation
    discussion_model: str = "ft:gpt-3.5-turbo-0125:personal::AliZC6m5"
    discussion_temperature: float = 1.0
    discussion_presence_penalty: float = 0.2
    discussion_frequency_penalty: float = 0.0

    # Flyer generation
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    flyer_venue: str = "KFC, Ikeja ICM"
    flyer_time: str = "7pm on Friday"

    # Fine tuning
    fine_tune_base_model: str = "gpt-3.5-turbo"
    training_file: str = "data/bibletalk.jsonl"
    poll_interval_seconds: float = 60.0
    status_reset_delay_seconds: float = 0.5

    # Client
    gateway_url: str = "http://localhost:8000"

    @model_validator(mode="before")
    @classmethod
    def load_api_key_from_secret_manager(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Fill in the OpenAI API key from Secret Manager if it is not already set."""
        project_id = data.get("google_project_id")
        if data.get("openai_api_key") or not project_id:
            return data

        value = _get_secret_value(project_id, data.get("environment") or "dev")
        if value:
            data["openai_api_key"] = value
        return data


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Default settings instance
settings = get_settings()
