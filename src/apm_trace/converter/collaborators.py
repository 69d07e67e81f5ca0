"""Reference collaborators for running the builder outside an agent.

The production agent supplies its own scoring policy, store, and
environment; these are enough for the CLI and for tests.
"""

from dataclasses import dataclass, field

from apm_trace.converter.trace_builder import TraceBuilder
from apm_trace.converter.types import Request, Trace, TraceType
from apm_trace.telemetry import TRACE_SKIPPED, TRACE_STORED, get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class StaticEnvironment:
    """Environment metadata fixed at construction time."""

    git_revision: str = ""
    hostname: str = ""

    @classmethod
    def from_settings(cls) -> "StaticEnvironment":
        from apm_trace.config import get_settings  # noqa: PLC0415

        settings = get_settings()
        return cls(git_revision=settings.git_revision, hostname=settings.hostname)


@dataclass
class FixedScorePolicy:
    """Gives every request the same score and counts stored requests."""

    points: float = 1.0
    stored_names: list[str] = field(default_factory=list)

    def score(self, request: Request) -> float:
        return self.points

    def stored(self, request: Request) -> None:
        self.stored_names.append(request.unique_name)


@dataclass
class InMemoryTraceStore:
    """Converts every offered builder whose score meets ``min_score``.

    Attributes:
        min_score: Builders scoring below this are not converted.
        traces: Converted traces with their type, in the order offered.
    """

    min_score: float = 0.0
    traces: list[tuple[TraceType, Trace]] = field(default_factory=list)

    def track_possible_trace(self, builder: TraceBuilder, trace_type: TraceType) -> None:
        if builder.score is None or builder.score < self.min_score:
            log.debug(TRACE_SKIPPED, request=builder.name, reason="score", score=builder.score)
            return

        trace = builder.convert()
        if trace is None:
            log.debug(TRACE_SKIPPED, request=builder.name, reason="no_root_frame")
            return

        self.traces.append((trace_type, trace))
        log.debug(
            TRACE_STORED,
            request=builder.name,
            request_id=trace.request_id,
            spans=len(trace.spans),
        )
