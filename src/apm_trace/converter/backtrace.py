"""Ruby backtrace parsing.

Turns lines such as::

    app/controllers/users_controller.rb:10:in `index'

into ``BacktraceFrame(file="app/controllers/users_controller.rb", line="10",
function="index")``. Parsing is all-or-nothing.
"""

import re
from collections.abc import Sequence

from apm_trace.converter.types import BacktraceFrame
from apm_trace.errors import BacktraceParseError

# Ruby < 3.4 opens the method name with a backtick, 3.4+ with a single quote
_FRAME_RE = re.compile(r"(.*):(\d+):in [`'](.*)'")


def parse_backtrace(lines: Sequence[str]) -> list[BacktraceFrame]:
    """Parse every line of a backtrace.

    Args:
        lines: Raw backtrace lines, innermost frame first.

    Returns:
        One BacktraceFrame per line, in input order.

    Raises:
        BacktraceParseError: If any line does not match.
    """
    frames = []
    for index, line in enumerate(lines):
        match = _FRAME_RE.search(line)
        if match is None:
            raise BacktraceParseError(line, index)
        frames.append(
            BacktraceFrame(file=match.group(1), line=match.group(2), function=match.group(3))
        )
    return frames


def try_parse_backtrace(lines: Sequence[str]) -> list[BacktraceFrame] | None:
    """Parse a backtrace, returning None instead of raising on bad input."""
    try:
        return parse_backtrace(lines)
    except BacktraceParseError:
        return None
