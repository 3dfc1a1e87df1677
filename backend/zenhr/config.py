from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "ZenHR"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Remote store. Empty means the ledger runs on the in-memory store only.
    database_url: str = ""
    store_timeout_seconds: float = 5.0

    # Local snapshot used when the remote store is unreachable.
    cache_path: str = ".zenhr_cache.json"

    # Spreadsheet webhook receiving copies of leave events.
    webhook_url: str = ""
    webhook_timeout_seconds: float = 10.0

    default_annual_leave_limit: int = 2
    default_public_holiday_count: int = 13

    # Calendar used for "today" and the current year when moving used-day counters.
    timezone: str = "Asia/Bangkok"

    # Signing key for bearer tokens. Empty means a random key per process.
    jwt_secret: str = ""
    session_ttl_hours: float = 12.0

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
