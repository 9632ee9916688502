"""
Configuration settings for Lemon Learn.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///~/.lemon_learn/lessons.db",
        description="SQLAlchemy connection string for the lesson store",
    )

    # ========================================
    # Scheduling
    # ========================================
    timezone: str = Field(
        default="",
        description="IANA zone that defines 'today' for due lessons (empty = machine local zone)",
    )
    require_title: bool = Field(
        default=False,
        description="Reject lessons with a blank title",
    )

    # ========================================
    # Reminders
    # ========================================
    notifications_enabled: bool = Field(
        default=True,
        description="Whether due-lesson reminders may be shown",
    )
    reminder_interval_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes between due-lesson reminder checks",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown time zone: {value}") from e
        return value

    def get_timezone(self) -> tzinfo | None:
        """Reference zone for scheduling, or None for the local zone."""
        if not self.timezone:
            return None
        return ZoneInfo(self.timezone)

    def get_scheduler_config(self) -> dict[str, Any]:
        """Get scheduling and reminder configuration as a dictionary."""
        return {
            "timezone": self.timezone or "local",
            "require_title": self.require_title,
            "reminders": {
                "enabled": self.notifications_enabled,
                "interval_minutes": self.reminder_interval_minutes,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
