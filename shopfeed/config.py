"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_ACHIEVEMENT_TITLE = "🎉 Achievement Unlocked!"
DEFAULT_ACHIEVEMENT_MESSAGE = (
    "Congratulations! You've reached Level {level} with ${profit} profit this month!"
)


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./shopfeed.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify bearer tokens issued by the identity provider",
        min_length=1,
    )
    access_token_algorithm: str = Field(
        default="HS256", description="JWT signing algorithm for bearer tokens"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone name used for timestamps and monthly periods",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    notification_list_limit: int = Field(
        default=50,
        description="Maximum number of notifications returned by a feed fetch",
        gt=0,
    )
    notification_retention_days: int | None = Field(
        default=30,
        description="Days after which a notification expires; empty disables expiry",
        gt=0,
    )
    feed_queue_size: int = Field(
        default=100,
        description="Maximum number of pending change events per live subscription",
        gt=0,
    )
    achievement_notifications_enabled: bool = Field(
        default=True,
        description="Whether crossing an achievement threshold sends a notification",
    )
    achievement_notification_title: str = Field(
        default=DEFAULT_ACHIEVEMENT_TITLE, min_length=1
    )
    achievement_notification_message: str = Field(
        default=DEFAULT_ACHIEVEMENT_MESSAGE, min_length=1
    )
    log_level: str = Field(default="INFO", description="Level for the shopfeed loggers")

    @field_validator("notification_retention_days", mode="before")
    @classmethod
    def _empty_retention_disables_expiry(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported log level: {value}")
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
