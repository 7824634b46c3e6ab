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
        default="UTC",
        description="IANA timezone name (or UTC offset) used for timestamps",
    )
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Origins allowed to call the API from a browser",
    )
    notification_max_connections_per_user: int = Field(
        default=3,
        description="Live notification streams kept per user; the oldest is evicted",
        gt=0,
    )
    notification_max_total_connections: int = Field(
        default=500,
        description="Live notification streams accepted across all users",
        gt=0,
    )
    notification_heartbeat_seconds: float = Field(
        default=30.0,
        description="Interval between keep-alive comments on notification streams",
        gt=0,
    )
    notification_batch_size: int = Field(
        default=500,
        description="Recipients persisted per insert when dispatching notifications",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_connection_caps(self) -> "Settings":
        if self.notification_max_connections_per_user > self.notification_max_total_connections:
            raise ValueError(
                "NOTIFICATION_MAX_CONNECTIONS_PER_USER cannot exceed "
                "NOTIFICATION_MAX_TOTAL_CONNECTIONS"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
