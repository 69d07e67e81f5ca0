"""Span count limiting for a single trace conversion.

To keep huge requests from producing huge traces, the builder stops starting
new child subtrees once a frame's accumulated span count passes the limit.
"""

from enum import Enum

from apm_trace.config.settings import DEFAULT_MAX_SPANS
from apm_trace.telemetry import SPAN_LIMIT_EXCEEDED, get_logger

log = get_logger(__name__)


class LimitState(str, Enum):
    """Whether the limit has been hit during this conversion."""

    NORMAL = "normal"
    LIMITED = "limited"


class SpanLimiter:
    """Tracks the span limit for one conversion.

    The state moves NORMAL -> LIMITED at most once and never goes back, so
    the limit is logged a single time per conversion. Do not share an
    instance between requests.

    Args:
        request_name: Unique name of the request, included in the log event.
        max_spans: Count that must be exceeded before checks report over limit.
    """

    def __init__(self, request_name: str, max_spans: int = DEFAULT_MAX_SPANS) -> None:  # noqa: D107
        self.request_name = request_name
        self.max_spans = max_spans
        self.state = LimitState.NORMAL

    @property
    def limited(self) -> bool:
        return self.state is LimitState.LIMITED

    def over_limit(self, current_count: int) -> bool:
        """Check a running span count against the limit.

        Args:
            current_count: Spans accumulated so far by the caller.

        Returns:
            True if current_count is greater than max_spans.
        """
        if current_count <= self.max_spans:
            return False

        if self.state is LimitState.NORMAL:
            self.state = LimitState.LIMITED
            log.debug(
                SPAN_LIMIT_EXCEEDED,
                request=self.request_name,
                max_spans=self.max_spans,
                span_count=current_count,
            )
        return True
