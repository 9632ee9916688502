"""
Unit tests for Settings.
"""

import pytest
from pydantic import ValidationError

from config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "TIMEZONE", "LOG_LEVEL", "NOTIFICATIONS_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///~/.lemon_learn/lessons.db"
    assert settings.timezone == ""
    assert settings.get_timezone() is None
    assert settings.reminder_interval_minutes == 60
    assert settings.notifications_enabled is True
    assert settings.require_title is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("REMINDER_INTERVAL_MINUTES", "15")
    monkeypatch.setenv("NOTIFICATIONS_ENABLED", "false")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite://"
    assert settings.get_scheduler_config()["reminders"] == {"enabled": False, "interval_minutes": 15}


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, timezone="Not/A_Zone")


def test_reminder_interval_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, reminder_interval_minutes=0)
