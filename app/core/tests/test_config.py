"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    """Settings should have sensible defaults."""
    settings = Settings()

    assert settings.app_name == "TaskHub"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.seeder_seed == 12345
    assert settings.seeder_allow_production is False
    assert settings.seeder_backup_before_seed is True


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("SEEDER_SEED", "99")
    monkeypatch.setenv("SEEDER_BACKUP_DIR", "/tmp/snapshots")

    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.seeder_seed == 99
    assert settings.seeder_backup_dir == "/tmp/snapshots"


@pytest.mark.parametrize(
    ("app_env", "profile"),
    [
        ("development", "development"),
        ("testing", "test"),
        ("staging", "development"),
        ("production", "production"),
    ],
)
def test_seeder_profile_follows_app_env(app_env, profile):
    """The seeder profile defaults from APP_ENV."""
    assert Settings(app_env=app_env).resolved_seeder_profile == profile


def test_explicit_seeder_profile_wins():
    settings = Settings(app_env="production", seeder_profile="test")

    assert settings.resolved_seeder_profile == "test"


def test_password_rounds_bounds():
    """bcrypt cost factors outside 4..31 are rejected."""
    assert Settings(seeder_password_rounds=4).seeder_password_rounds == 4
    with pytest.raises(ValidationError):
        Settings(seeder_password_rounds=3)
    with pytest.raises(ValidationError):
        Settings(seeder_password_rounds=32)
