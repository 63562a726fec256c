"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from resq_client.core.config import FALLBACK_BEACON_ID, LogFormat, LogLevel, Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Drop RESQ_ variables so defaults are visible."""
    import os

    for key in list(os.environ):
        if key.startswith("RESQ_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestSettings:
    """Test Settings defaults, env overrides and derived configs."""

    def test_defaults(self, clean_env) -> None:
        settings = Settings(_env_file=None)

        assert settings.API_BASE_URL == "https://resq-server.onrender.com/api"
        assert settings.POLL_INTERVAL == 5.0
        assert settings.BLE_SCAN_TIMEOUT == 10.0
        assert settings.FALLBACK_BEACON_ID == FALLBACK_BEACON_ID
        assert settings.RATING_ENDPOINT_ENABLED is False
        assert settings.is_development

    def test_env_overrides(self, clean_env) -> None:
        clean_env.setenv("RESQ_API_BASE_URL", "https://campus.example/api/")
        clean_env.setenv("RESQ_POLL_INTERVAL", "2.5")
        clean_env.setenv("RESQ_API_TOKEN", "t0ken")
        clean_env.setenv("RESQ_LOG_FORMAT", "json")

        settings = Settings(_env_file=None)

        assert settings.API_BASE_URL == "https://campus.example/api"
        assert settings.session_config.poll_interval == 2.5
        assert settings.api_config.token.get_secret_value() == "t0ken"
        assert settings.logging_config.format is LogFormat.JSON

    def test_scan_config_tokens(self, clean_env) -> None:
        clean_env.setenv("RESQ_BLE_MARKER_TOKENS", "Beacon, TAG ,,")
        clean_env.setenv("RESQ_BLE_SCAN_TIMEOUT", "4")

        scan = Settings(_env_file=None).scan_config

        assert scan.marker_tokens == ("beacon", "tag")
        assert scan.timeout == 4.0

    def test_session_config_keeps_backoff_above_interval(self, clean_env) -> None:
        """Test a cap below the interval is lifted to the interval."""
        settings = Settings(_env_file=None, POLL_INTERVAL=20, POLL_MAX_BACKOFF=10)

        assert settings.session_config.max_backoff == 20

    def test_position_must_be_complete(self, clean_env) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_LATITUDE=10.0)

    def test_scan_timeout_bounds(self, clean_env) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, BLE_SCAN_TIMEOUT=120)

    def test_model_dump_safe_masks_token(self, clean_env) -> None:
        clean_env.setenv("RESQ_API_TOKEN", "t0ken")

        data = Settings(_env_file=None).model_dump_safe()

        assert data["API_TOKEN"] == "***masked***"
        assert data["api_config"]["token"] == "***masked***"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_log_level_from_env(self, clean_env) -> None:
        clean_env.setenv("RESQ_LOG_LEVEL", "DEBUG")

        assert Settings(_env_file=None).logging_config.level is LogLevel.DEBUG
