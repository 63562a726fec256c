"""Logging configuration and setup for the ResQ SOS client."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, field_validator
from rich.console import Console
from rich.logging import RichHandler
from structlog.processors import JSONRenderer, add_log_level
from structlog.types import EventDict, WrappedLogger


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported logging output formats."""

    JSON = "json"
    TEXT = "text"


class LoggingConfig(BaseModel):
    """Centralized logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Logging level for the client")
    format: LogFormat = Field(default=LogFormat.TEXT, description="Output format for log messages")

    console_enabled: bool = Field(default=True, description="Enable console output")
    file_enabled: bool = Field(default=False, description="Enable file output")
    file_path: str = Field(default="logs/resq-client.log", description="Log file path")

    max_file_size: int = Field(
        default=5 * 1024 * 1024,  # 5MB
        description="Maximum log file size in bytes",
    )
    backup_count: int = Field(default=3, description="Number of backup files to keep")

    third_party_levels: dict[str, LogLevel] = Field(
        default_factory=lambda: {
            "httpx": LogLevel.WARNING,
            "httpcore": LogLevel.WARNING,
            "bleak": LogLevel.WARNING,
        },
        description="Logging levels for third-party libraries",
    )

    @field_validator("max_file_size")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is reasonable."""
        if v < 1024 * 1024:  # 1MB minimum
            raise ValueError("Max file size must be at least 1MB")
        if v > 100 * 1024 * 1024:  # 100MB maximum
            raise ValueError("Max file size cannot exceed 100MB")
        return v


class StructuredLogger:
    """Configures stdlib handlers and structlog processors once per process."""

    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig) -> None:
        """Configure structured logging."""
        if cls._configured:
            return

        handlers: list[logging.Handler] = []

        if config.console_enabled:
            handlers.append(cls._create_console_handler(config))

        if config.file_enabled:
            handlers.append(cls._create_file_handler(config))

        logging.basicConfig(level=config.level.value, handlers=handlers, force=True)

        for lib_name, level in config.third_party_levels.items():
            logging.getLogger(lib_name).setLevel(level.value)

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                add_log_level,
                cls._add_timestamp,
                JSONRenderer() if config.format == LogFormat.JSON else cls._text_renderer,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        cls._configured = True

        logger = structlog.get_logger(__name__)
        logger.info(
            "Logging system initialized",
            level=config.level.value,
            format=config.format.value,
            file_path=config.file_path if config.file_enabled else None,
        )

    @classmethod
    def reset(cls) -> None:
        """Allow a later ``configure`` call to take effect again."""
        cls._configured = False
        structlog.reset_defaults()

    @staticmethod
    def _create_console_handler(config: LoggingConfig) -> logging.Handler:
        """Create console handler: rich output for text, plain JSON lines otherwise."""
        if config.format == LogFormat.TEXT:
            return RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                rich_tracebacks=True,
                markup=False,
            )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        return handler

    @staticmethod
    def _create_file_handler(config: LoggingConfig) -> logging.Handler:
        """Create rotating file handler."""
        from logging.handlers import RotatingFileHandler

        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        handler.setFormatter(JSONFormatter() if config.format == LogFormat.JSON else TextFormatter())
        return handler

    @staticmethod
    def _add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        """Add timestamp to log entry."""
        event_dict["timestamp"] = datetime.now(UTC).isoformat()
        return event_dict

    @staticmethod
    def _text_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Render log entry as text."""
        event_dict.pop("timestamp", None)
        event_dict.pop("level", None)
        event = event_dict.pop("event", "")

        if event_dict:
            extra = " ".join(f"{k}={v}" for k, v in event_dict.items())
            return f"{event} [{extra}]"
        return str(event)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for stdlib records."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        message = record.getMessage()
        try:
            payload = json.loads(message)
        except ValueError:
            payload = {"message": message}
        if not isinstance(payload, dict):
            payload = {"message": message}

        payload.setdefault("timestamp", datetime.fromtimestamp(record.created, tz=UTC).isoformat())
        payload.setdefault("level", record.levelname.lower())
        payload["logger"] = record.name
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(config: LoggingConfig) -> None:
    """Set up client logging."""
    StructuredLogger.configure(config)


def get_structured_logger(name: str) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
