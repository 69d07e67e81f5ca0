"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from apm_trace.telemetry.events import (
    SNAPSHOT_LOADED,
    SPAN_LIMIT_EXCEEDED,
    TRACE_OFFERED,
    TRACE_SKIPPED,
    TRACE_STORED,
)
from apm_trace.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    # Event constants
    "TRACE_OFFERED",
    "SPAN_LIMIT_EXCEEDED",
    "TRACE_STORED",
    "TRACE_SKIPPED",
    "SNAPSHOT_LOADED",
]
