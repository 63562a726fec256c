"""Client configuration."""

from .ble_settings import FALLBACK_BEACON_ID, BeaconScanSettings
from .config import Environment, Settings, get_settings
from .logging import LogFormat, LoggingConfig, LogLevel, StructuredLogger, get_structured_logger, setup_logging
from .session_settings import ApiSettings, SessionSettings

__all__ = [
    "Settings",
    "Environment",
    "get_settings",
    "ApiSettings",
    "SessionSettings",
    "BeaconScanSettings",
    "FALLBACK_BEACON_ID",
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "StructuredLogger",
    "setup_logging",
    "get_structured_logger",
]
