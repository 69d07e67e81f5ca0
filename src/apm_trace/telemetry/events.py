"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings.
"""

# Trace builder events
TRACE_OFFERED = "trace_offered"
SPAN_LIMIT_EXCEEDED = "span_limit_exceeded"

# Store events
TRACE_STORED = "trace_stored"
TRACE_SKIPPED = "trace_skipped"

# CLI events
SNAPSHOT_LOADED = "snapshot_loaded"
