"""Configuration management for the ResQ SOS client."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .ble_settings import FALLBACK_BEACON_ID, BeaconScanSettings
from .logging import LogFormat, LoggingConfig, LogLevel
from .session_settings import ApiSettings, SessionSettings

load_dotenv()


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="RESQ_",
    )

    # Application Configuration
    APP_NAME: str = Field(default="ResQ SOS Client")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: Environment = Field(default=Environment.DEVELOPMENT)

    # Remote incident service
    API_BASE_URL: str = Field(default="https://resq-server.onrender.com/api")
    API_TIMEOUT: float = Field(default=30.0, ge=1.0, le=300.0)
    API_TOKEN: SecretStr | None = Field(default=None)
    RATING_ENDPOINT_ENABLED: bool = Field(default=False)

    # Polling
    POLL_INTERVAL: float = Field(default=5.0, gt=0.0, le=300.0)
    POLL_MAX_BACKOFF: float = Field(default=30.0, gt=0.0, le=600.0)
    POLL_BACKOFF_JITTER: bool = Field(default=True)

    # Beacon scanning
    BLE_SCAN_TIMEOUT: float = Field(default=10.0, gt=0.0, le=60.0)
    BLE_RSSI_THRESHOLD: int = Field(default=-100, le=0)
    BLE_MARKER_TOKENS: str = Field(default="beacon,ibeacon,esp,nrf")
    FALLBACK_BEACON_ID: str = Field(default=FALLBACK_BEACON_ID)

    # Static position used when the device has no location service
    DEFAULT_LATITUDE: float | None = Field(default=None, ge=-90.0, le=90.0)
    DEFAULT_LONGITUDE: float | None = Field(default=None, ge=-180.0, le=180.0)

    # Logging Configuration
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_FORMAT: LogFormat = Field(default=LogFormat.TEXT)
    LOG_CONSOLE_ENABLED: bool = Field(default=True)
    LOG_FILE_ENABLED: bool = Field(default=False)
    LOG_FILE_PATH: str = Field(default="logs/resq-client.log")

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are appended with a leading slash."""
        return v.rstrip("/")

    @model_validator(mode="after")
    def check_default_position(self) -> Settings:
        """Latitude and longitude are configured together or not at all."""
        if (self.DEFAULT_LATITUDE is None) != (self.DEFAULT_LONGITUDE is None):
            raise ValueError("DEFAULT_LATITUDE and DEFAULT_LONGITUDE must be set together")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def api_config(self) -> ApiSettings:
        """Generate remote service configuration from individual settings."""
        return ApiSettings(
            base_url=self.API_BASE_URL,
            timeout=self.API_TIMEOUT,
            token=self.API_TOKEN,
            rating_endpoint_enabled=self.RATING_ENDPOINT_ENABLED,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def session_config(self) -> SessionSettings:
        """Generate polling configuration from individual settings."""
        return SessionSettings(
            poll_interval=self.POLL_INTERVAL,
            max_backoff=max(self.POLL_MAX_BACKOFF, self.POLL_INTERVAL),
            backoff_jitter=self.POLL_BACKOFF_JITTER,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def scan_config(self) -> BeaconScanSettings:
        """Generate beacon scan configuration from individual settings."""
        return BeaconScanSettings(
            timeout=self.BLE_SCAN_TIMEOUT,
            fallback_beacon_id=self.FALLBACK_BEACON_ID,
            rssi_threshold=self.BLE_RSSI_THRESHOLD,
            marker_tokens=tuple(self.BLE_MARKER_TOKENS.split(",")),
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def logging_config(self) -> LoggingConfig:
        """Generate logging configuration from individual settings."""
        return LoggingConfig(
            level=self.LOG_LEVEL,
            format=self.LOG_FORMAT,
            console_enabled=self.LOG_CONSOLE_ENABLED,
            file_enabled=self.LOG_FILE_ENABLED,
            file_path=self.LOG_FILE_PATH,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def setup_logging(self) -> None:
        """Initialize logging using the logging configuration."""
        from .logging import setup_logging

        setup_logging(self.logging_config)

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings without exposing secrets."""
        data = self.model_dump()

        if data.get("API_TOKEN"):
            data["API_TOKEN"] = "***masked***"
        if data.get("api_config", {}).get("token"):
            data["api_config"]["token"] = "***masked***"

        return data


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
