"""Conversion of a request's call-frame tree into a detailed trace.

The builder is handed to a store with ``record()``. If the store decides the
request is worth keeping it calls ``convert()``, which flattens the frame
tree into an ordered span list:

    root                      span 1 (parent "")
    ├── SQL/User/find         span 2 (parent span 1)
    └── View/users/index      span 3 (parent span 1)
        └── View/_row         span 4 (parent span 3)

Spans are emitted in pre-order, so a frame always precedes its descendants
and sibling subtrees stay contiguous.
"""

from collections.abc import Iterator
from typing import Any

from apm_trace.converter.backtrace import try_parse_backtrace
from apm_trace.converter.identifiers import generate_request_id, generate_span_id
from apm_trace.converter.span_limiter import SpanLimiter
from apm_trace.converter.types import (
    CallFrame,
    EnvironmentMetadata,
    Request,
    ScoringPolicy,
    Span,
    Trace,
    TraceStore,
    TraceType,
)
from apm_trace.telemetry import TRACE_OFFERED, get_logger

log = get_logger(__name__)

# Request-level tag keys
ALLOCATIONS_TAG = "allocations"
MEM_DELTA_TAG = "mem_delta"

# Span tag keys
START_ALLOCATIONS_TAG = "start_allocations"
STOP_ALLOCATIONS_TAG = "stop_allocations"
DESC_TAG = "desc"
BACKTRACE_TAG = "backtrace"

# Frame annotation key -> reported span tag key
ANNOTATION_TAGS = {
    "record_count": "db.record_count",
    "class_name": "db.class_name",
}


class TraceBuilder:
    """Builds a detailed trace for one request.

    Create one builder per request. Its SpanLimiter is private to the
    builder, so concurrent conversions of different requests need no locking.

    Args:
        request: The finished request.
        policy: Scoring policy; ``score()`` ranks the request and
            ``stored()`` is told when the trace is actually built.
        store: Store that decides whether to call ``convert()``.
        environment: Source of revision and hostname.
        max_spans: Span limit. Defaults to the configured ``max_spans``.
    """

    def __init__(
        self,
        request: Request,
        policy: ScoringPolicy,
        store: TraceStore,
        environment: EnvironmentMetadata,
        max_spans: int | None = None,
    ) -> None:  # noqa: D107
        if max_spans is None:
            from apm_trace.config import get_settings  # noqa: PLC0415

            max_spans = get_settings().max_spans

        self.request = request
        self.policy = policy
        self.store = store
        self.environment = environment
        self.limiter = SpanLimiter(request.unique_name, max_spans)
        self._points: float | None = None

    @property
    def name(self) -> str:
        return self.request.unique_name

    @property
    def score(self) -> float | None:
        """Score given by ``record()``, or None before it runs."""
        return self._points

    def record(self, trace_type: TraceType = TraceType.WEB, points: float | None = None) -> None:
        """Offer this request to the store.

        Args:
            trace_type: Kind of trace the store should file this under.
            points: Precomputed score. Asks the policy when omitted.
        """
        self._points = points if points is not None else self.policy.score(self.request)

        log.debug(TRACE_OFFERED, request=self.name, score=self._points, type=trace_type.value)

        # The store calls back into convert() if it wants the data
        self.store.track_possible_trace(self, trace_type)

    def convert(self) -> Trace | None:
        """Build the detailed trace.

        Returns:
            The Trace, or None when the request has no root frame.
        """
        root = self.request.root_frame
        if root is None:
            return None

        self.policy.stored(self.request)

        tags: dict[str, Any] = {
            ALLOCATIONS_TAG: root.total_allocations,
            MEM_DELTA_TAG: self.request.capture_mem_delta(),
        }
        # Context values win over computed ones
        tags.update(self.request.context.to_flat_dict())

        return Trace(
            request_id=generate_request_id(),
            revision=self.environment.git_revision,
            host=self.environment.hostname,
            start_time=root.start_time,
            stop_time=root.stop_time,
            type=self._trace_type(),
            path=self.request.annotations.get("uri") or "",
            code="",
            spans=self.flatten(root),
            tags=tags,
        )

    def flatten(self, frame: CallFrame, parent_id: str = "") -> list[Span]:
        """Flatten a frame and its descendants into pre-order spans.

        Before each child is started, the number of spans accumulated under
        the child's parent (the parent itself plus finished sibling subtrees)
        is checked against the limiter. Once over, remaining children of that
        parent are skipped whole; a subtree that was already started always
        finishes, so the result can exceed the limit by one subtree.

        Uses an explicit stack, so deep trees cannot exhaust the interpreter
        recursion limit.

        Args:
            frame: Frame to start from.
            parent_id: Span id of frame's parent, "" for the root.

        Returns:
            Spans in pre-order.
        """
        spans = [self._build_span(frame, parent_id)]
        # (span id, index of that span in `spans`, remaining children)
        stack: list[tuple[str, int, Iterator[CallFrame]]] = [
            (spans[0].span_id, 0, iter(frame.children))
        ]

        while stack:
            span_id, start_index, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                continue

            if self.limiter.over_limit(len(spans) - start_index):
                continue

            child_span = self._build_span(child, span_id)
            spans.append(child_span)
            stack.append((child_span.span_id, len(spans) - 1, iter(child.children)))

        return spans

    def _build_span(self, frame: CallFrame, parent_id: str) -> Span:
        return Span(
            span_id=generate_span_id(),
            parent_id=parent_id,
            start_time=frame.start_time,
            stop_time=frame.stop_time,
            operation=frame.operation,
            tags=self._span_tags(frame),
        )

    def _span_tags(self, frame: CallFrame) -> dict[str, Any]:
        tags: dict[str, Any] = {
            START_ALLOCATIONS_TAG: frame.allocations_start,
            STOP_ALLOCATIONS_TAG: frame.allocations_stop,
        }
        if frame.desc is not None:
            tags[DESC_TAG] = frame.desc

        for annotation_key, tag_key in ANNOTATION_TAGS.items():
            value = frame.annotations.get(annotation_key)
            if value is not None:
                tags[tag_key] = value

        if frame.backtrace is not None:
            parsed = try_parse_backtrace(frame.backtrace)
            if parsed is not None:
                tags[BACKTRACE_TAG] = [bt.model_dump() for bt in parsed]

        return tags

    def _trace_type(self) -> TraceType:
        if self.request.is_web():
            return TraceType.WEB
        if self.request.is_job():
            return TraceType.JOB
        return TraceType.UNKNOWN
