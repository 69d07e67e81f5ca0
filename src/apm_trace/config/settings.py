"""Converter configuration settings.

This module provides the TraceSettings class and settings singleton.
"""

import socket
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

from apm_trace.config.env_loader import Environment, get_environment, load_env_files
from apm_trace.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
)

log = structlog.get_logger(__name__)

DEFAULT_MAX_SPANS = 500


class TraceSettings(BaseSettings):
    """Unified converter configuration.

    Loads configuration from environment variables (``APM_TRACE_`` prefix),
    .env files, and defaults. Validates all values using Pydantic.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded manually via env_loader to honour environment priority
        env_prefix="APM_TRACE_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )

    # Telemetry
    log_dir: Path | None = Field(
        default=None, description="Directory for JSON log files (file logging off when unset)"
    )
    log_level: str = Field(
        default="INFO",
        alias="APP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console", alias="APP_LOG_FORMAT", description="Log format (json or console)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str | None) -> Path | None:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    # Conversion
    max_spans: int = Field(
        default=DEFAULT_MAX_SPANS,
        ge=1,
        description="Span count past which no new child subtree is started",
    )

    # Environment metadata
    hostname: str = Field(
        default_factory=socket.gethostname, description="Host reported on every trace"
    )
    git_revision: str = Field(default="", description="Code revision reported on every trace")


_settings: TraceSettings | None = None


def load_settings() -> TraceSettings:
    """Load and validate converter configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates TraceSettings instance (reads from environment variables)
    3. Validates all values using Pydantic

    Returns:
        Validated TraceSettings instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    load_env_files()

    try:
        config = TraceSettings()
        log.info(
            "settings_loaded",
            environment=config.environment.value,
            log_level=config.log_level,
            max_spans=config.max_spans,
        )
        return config
    except Exception as e:
        log.error("settings_load_failed", error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> TraceSettings:
    """Get the settings singleton.

    Returns:
        TraceSettings instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached singleton so the next get_settings() reloads."""
    global _settings
    _settings = None
