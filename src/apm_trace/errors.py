"""Exception hierarchy for the trace converter."""


class TraceError(Exception):
    """Base class for converter errors."""

    pass


class BacktraceParseError(TraceError):
    """Raised when a backtrace line does not look like a Ruby stack frame."""

    def __init__(self, line: str, index: int) -> None:  # noqa: D107
        self.line = line
        self.index = index
        super().__init__(f"Unparseable backtrace line {index}: {line!r}")


class RequestSnapshotError(TraceError):
    """Raised when a request snapshot cannot be read or validated."""

    pass
