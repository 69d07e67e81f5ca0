"""Call-frame tree to detailed trace conversion."""

from apm_trace.converter.backtrace import parse_backtrace, try_parse_backtrace
from apm_trace.converter.collaborators import (
    FixedScorePolicy,
    InMemoryTraceStore,
    StaticEnvironment,
)
from apm_trace.converter.identifiers import generate_request_id, generate_span_id
from apm_trace.converter.request import FlatContext, RecordedRequest, load_request
from apm_trace.converter.span_limiter import LimitState, SpanLimiter
from apm_trace.converter.trace_builder import TraceBuilder
from apm_trace.converter.types import (
    BacktraceFrame,
    CallFrame,
    EnvironmentMetadata,
    Request,
    RequestContext,
    ScoringPolicy,
    Span,
    Trace,
    TraceStore,
    TraceType,
)

__all__ = [
    "BacktraceFrame",
    "CallFrame",
    "EnvironmentMetadata",
    "FixedScorePolicy",
    "FlatContext",
    "InMemoryTraceStore",
    "LimitState",
    "RecordedRequest",
    "Request",
    "RequestContext",
    "ScoringPolicy",
    "Span",
    "SpanLimiter",
    "StaticEnvironment",
    "Trace",
    "TraceBuilder",
    "TraceStore",
    "TraceType",
    "generate_request_id",
    "generate_span_id",
    "load_request",
    "parse_backtrace",
    "try_parse_backtrace",
]
