"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone (or UTC+HH:MM offset) used for timestamps",
    )
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma separated list of origins allowed by CORS",
    )

    notification_dedupe_window_hours: int = Field(
        default=24,
        description="Hours an unread alert keeps suppressing repeats of the same condition",
        gt=0,
    )
    expiry_warning_days: int = Field(
        default=30,
        description="Batches expiring within this many days produce an expiry alert",
        gt=0,
    )
    expiry_soon_days: int = Field(
        default=14,
        description="Expiry alerts at or below this many days are medium priority",
        gt=0,
    )
    expiry_critical_days: int = Field(
        default=3,
        description="Expiry alerts at or below this many days are high priority",
        ge=0,
    )
    whatsapp_pending_minutes: int = Field(
        default=30,
        description="Queued WhatsApp messages older than this are reported as stuck",
        gt=0,
    )
    dispatch_queue_size: int = Field(
        default=100,
        description="Maximum pending realtime messages per connected channel",
        gt=0,
    )
    notification_scheduler_enabled: bool = Field(
        default=False,
        description="Run periodic notification scans for every active store",
    )
    notification_scan_interval_minutes: int = Field(
        default=60,
        description="Minutes between scheduled notification scans",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_expiry_windows(self) -> "Settings":
        if not (
            self.expiry_critical_days <= self.expiry_soon_days <= self.expiry_warning_days
        ):
            raise ValueError(
                "EXPIRY_CRITICAL_DAYS <= EXPIRY_SOON_DAYS <= EXPIRY_WARNING_DAYS must hold"
            )
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
