"""Configuration management for the trace converter.

Settings come from environment variables, .env files, and defaults.
"""

from apm_trace.config.env_loader import Environment, get_environment
from apm_trace.config.settings import (
    DEFAULT_MAX_SPANS,
    TraceSettings,
    get_settings,
    load_settings,
    reset_settings,
)

__all__ = [
    "DEFAULT_MAX_SPANS",
    "Environment",
    "TraceSettings",
    "get_environment",
    "get_settings",
    "load_settings",
    "reset_settings",
]
