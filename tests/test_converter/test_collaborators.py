"""Tests for the reference collaborators."""

from datetime import datetime, timezone

import pytest

from apm_trace.converter import (
    CallFrame,
    FixedScorePolicy,
    InMemoryTraceStore,
    RecordedRequest,
    StaticEnvironment,
    TraceBuilder,
    TraceType,
)


def _root() -> CallFrame:
    now = datetime(2026, 3, 14, tzinfo=timezone.utc)
    return CallFrame(operation="Controller/home/index", start_time=now, stop_time=now)


class TestStaticEnvironment:
    """Test environment metadata."""

    def test_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APM_TRACE_GIT_REVISION", "deadbeef")
        monkeypatch.setenv("APM_TRACE_HOSTNAME", "worker-7")

        env = StaticEnvironment.from_settings()

        assert env.git_revision == "deadbeef"
        assert env.hostname == "worker-7"


class TestFixedScorePolicy:
    """Test the constant scoring policy."""

    def test_score_and_stored(self) -> None:
        policy = FixedScorePolicy(points=4.0)
        request = RecordedRequest(unique_name="Controller/home/index")

        assert policy.score(request) == 4.0
        policy.stored(request)
        assert policy.stored_names == ["Controller/home/index"]


class TestInMemoryTraceStore:
    """Test the eager in-memory store."""

    def _builder(self, store: InMemoryTraceStore, root: CallFrame | None) -> TraceBuilder:
        request = RecordedRequest(unique_name="Controller/home/index", root_frame=root, web=True)
        return TraceBuilder(request, FixedScorePolicy(), store, StaticEnvironment(), max_spans=500)

    def test_converts_offered_builder(self) -> None:
        store = InMemoryTraceStore()
        self._builder(store, _root()).record(TraceType.WEB, points=1.0)

        assert len(store.traces) == 1
        assert store.traces[0][0] is TraceType.WEB

    def test_skips_low_scores(self) -> None:
        store = InMemoryTraceStore(min_score=5.0)
        self._builder(store, _root()).record(points=1.0)
        assert store.traces == []

    def test_skips_requests_without_root(self) -> None:
        store = InMemoryTraceStore()
        self._builder(store, None).record(points=1.0)
        assert store.traces == []
