"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "food-health/0.1 (support@example.com)"
    score_v2_enabled: bool = False
    log_level: str = "INFO"
    default_portion_g: float = 30.0
    report_cache_ttl_seconds: int = 3600
    report_cache_max_entries: int = 1024
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
