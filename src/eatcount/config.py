"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    openai_reasoning_effort: str | None = None
    openai_temperature: float | None = 0.3
    openai_store: bool = False
    fatsecret_client_id: str | None = None
    fatsecret_client_secret: str | None = None
    fatsecret_token_url: str = "https://oauth.fatsecret.com/connect/token"
    fatsecret_api_url: str = "https://platform.fatsecret.com/rest/server.api"
    fatsecret_scope: str = "basic"
    supabase_url: str
    supabase_service_key: str
    api_key: str | None = None
    timezone: str = "UTC"
    default_calorie_target: int = 2000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
