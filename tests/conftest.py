"""Shared fixtures for converter tests."""

from collections.abc import Callable, Iterator, Sequence
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from apm_trace.config import reset_settings
from apm_trace.converter import CallFrame

T0 = datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc)

FrameFactory = Callable[..., CallFrame]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep .env files and APM_TRACE_* variables from leaking into tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "test")
    for name in ("APM_TRACE_MAX_SPANS", "APM_TRACE_GIT_REVISION", "APM_TRACE_HOSTNAME", "APM_TRACE_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_frame() -> FrameFactory:
    """Build call frames with sensible timing defaults.

    Frames start at a fixed instant and last 5 ms unless overridden.
    """

    def _make(
        operation: str = "Controller/users/index",
        children: Sequence[CallFrame] = (),
        **kwargs: Any,
    ) -> CallFrame:
        kwargs.setdefault("start_time", T0)
        kwargs.setdefault("stop_time", kwargs["start_time"] + timedelta(milliseconds=5))
        return CallFrame(operation=operation, children=list(children), **kwargs)

    return _make
