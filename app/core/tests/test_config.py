"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    """Settings should have sensible defaults."""
    settings = Settings()

    assert settings.app_name == "AdminInsights"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.api_port == 8080


def test_settings_feature_defaults():
    """Analytics, table and export limits have defaults."""
    settings = Settings()

    assert settings.analytics_default_period == "30d"
    assert settings.analytics_max_date_range_days == 730
    assert settings.tables_default_page_size == 10
    assert settings.tables_max_page_size == 100
    assert settings.inventory_low_stock_threshold == 10
    assert settings.export_datetime_format == "%m/%d/%Y, %I:%M:%S %p"


def test_settings_is_development_property():
    """is_development should return True for development env."""
    settings = Settings(app_env="development")
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_settings_is_testing_property():
    settings = Settings(app_env="testing")
    assert settings.is_testing is True


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("TABLES_MAX_PAGE_SIZE", "250")

    # Create new settings instance (not cached)
    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.debug is True
    assert settings.log_level == "DEBUG"
    assert settings.tables_max_page_size == 250


@pytest.mark.parametrize(
    "field", ["tables_default_page_size", "tables_max_page_size", "export_max_rows"]
)
def test_limits_must_be_positive(field):
    """Zero limits are rejected."""
    with pytest.raises(ValidationError):
        Settings(**{field: 0})
