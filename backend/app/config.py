"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Catalog type whitelists are configuration, not code constants

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Whitelists as list[str] env values (JSON-encoded): domain values evolve without a deploy
"""

from datetime import time

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://journal:journal@db:5432/journal"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Managed hosts provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Catalog whitelists
    tag_types: list[str] = ["General Activity", "Soothing Activity"]
    activity_types: list[str] = ["Soothing"]
    default_tags: list[str] = ["Home 🏠", "Work 💻", "Hobbies 💃", "Self-Care 🥰"]
    default_tag_type: str = "General Activity"

    # Daily reflection alert
    reflection_alert_default_time: time = time(21, 0)

    # Field encryption: "plaintext" or "fernet"
    field_cipher: str = "plaintext"
    field_cipher_key: str | None = None

    # Analytics: "logging" or "mixpanel"
    analytics_backend: str = "logging"
    mixpanel_token: str | None = None
    mixpanel_api_url: str = "https://api.mixpanel.com/track"
    analytics_timeout_seconds: float = 5.0

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
