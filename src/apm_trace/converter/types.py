"""Type definitions for trace conversion.

This module defines:
- CallFrame: one node of the instrumented operation tree (input)
- Span, BacktraceFrame, Trace: the flattened detailed trace (output)
- TraceType: request classification
- Protocols for the collaborators the builder talks to
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from apm_trace.converter.trace_builder import TraceBuilder


class TraceType(str, Enum):
    """Classification of the request a trace was built from."""

    WEB = "Web"
    JOB = "Job"
    UNKNOWN = "Unknown"


class CallFrame(BaseModel):
    """One timed unit of work in the instrumented operation tree.

    Frames are produced by the instrumentation layer and are read-only while
    a conversion runs.
    """

    model_config = ConfigDict(frozen=True)

    operation: str = Field(..., description="Metric name, e.g. 'SQL/User/find'")
    start_time: datetime
    stop_time: datetime
    allocations_start: int = Field(0, ge=0)
    allocations_stop: int = Field(0, ge=0)
    desc: str | None = Field(None, description="Free-text description, e.g. sanitized SQL")
    annotations: dict[str, Any] = Field(default_factory=dict)
    backtrace: list[str] | None = Field(None, description="Raw stack-frame lines")
    children: list[CallFrame] = Field(default_factory=list)

    @field_validator("annotations", mode="before")
    @classmethod
    def default_annotations(cls, v: dict[str, Any] | None) -> dict[str, Any]:
        """Treat missing (null) annotations as an empty mapping."""
        return {} if v is None else v

    @property
    def total_allocations(self) -> int:
        """Allocations made between the frame's start and stop."""
        return self.allocations_stop - self.allocations_start


class BacktraceFrame(BaseModel):
    """One parsed backtrace line."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: str
    function: str


class Span(BaseModel):
    """The flattened, reported form of one call frame."""

    model_config = ConfigDict(frozen=True)

    span_id: str
    parent_id: str = ""
    start_time: datetime
    stop_time: datetime
    operation: str
    tags: dict[str, Any] = Field(default_factory=dict)


class Trace(BaseModel):
    """Detailed trace for one request: request metadata plus its spans."""

    model_config = ConfigDict(frozen=True)

    request_id: str
    revision: str
    host: str
    start_time: datetime
    stop_time: datetime
    type: TraceType
    path: str = ""
    code: str = ""
    spans: list[Span] = Field(default_factory=list)
    tags: dict[str, Any] = Field(default_factory=dict)


class RequestContext(Protocol):
    """User-supplied request context (user id, account, custom keys)."""

    def to_flat_dict(self) -> Mapping[str, Any]: ...


class Request(Protocol):
    """A finished request as seen by the converter."""

    @property
    def root_frame(self) -> CallFrame | None: ...

    @property
    def annotations(self) -> Mapping[str, Any]: ...

    @property
    def unique_name(self) -> str: ...

    @property
    def context(self) -> RequestContext: ...

    def capture_mem_delta(self) -> float:
        """Memory growth over the request, in megabytes."""
        ...

    def is_web(self) -> bool: ...

    def is_job(self) -> bool: ...


class ScoringPolicy(Protocol):
    """Decides how interesting a request is."""

    def score(self, request: Request) -> float: ...

    def stored(self, request: Request) -> None: ...


class TraceStore(Protocol):
    """Receives builders and decides whether to convert them."""

    def track_possible_trace(self, builder: TraceBuilder, trace_type: TraceType) -> None: ...


class EnvironmentMetadata(Protocol):
    """Host level facts stamped on every trace."""

    @property
    def git_revision(self) -> str: ...

    @property
    def hostname(self) -> str: ...
