"""Tests for backtrace parsing."""

import pytest

from apm_trace.converter.backtrace import parse_backtrace, try_parse_backtrace
from apm_trace.converter.types import BacktraceFrame
from apm_trace.errors import BacktraceParseError


class TestParseBacktrace:
    """Test all-or-nothing backtrace parsing."""

    def test_parses_single_line(self) -> None:
        frames = parse_backtrace(["a/b.rb:10:in `foo'"])

        assert frames == [BacktraceFrame(file="a/b.rb", line="10", function="foo")]
        assert frames[0].model_dump() == {"file": "a/b.rb", "line": "10", "function": "foo"}

    def test_preserves_line_order(self) -> None:
        lines = [
            "app/models/user.rb:42:in `find_by_email'",
            "app/controllers/users_controller.rb:10:in `index'",
        ]

        frames = parse_backtrace(lines)

        assert [f.function for f in frames] == ["find_by_email", "index"]
        assert [f.line for f in frames] == ["42", "10"]

    def test_accepts_single_quoted_function(self) -> None:
        """Ruby 3.4 style backtraces open the method name with a quote."""
        frames = parse_backtrace(["app/models/user.rb:7:in 'User#save'"])
        assert frames[0].function == "User#save"

    def test_file_may_contain_colons(self) -> None:
        frames = parse_backtrace(["C:/app/models/user.rb:7:in `save'"])
        assert frames[0].file == "C:/app/models/user.rb"
        assert frames[0].line == "7"

    def test_block_frames(self) -> None:
        frames = parse_backtrace(["lib/worker.rb:3:in `block in perform'"])
        assert frames[0].function == "block in perform"

    def test_empty_backtrace(self) -> None:
        assert parse_backtrace([]) == []

    def test_one_bad_line_fails_whole_parse(self) -> None:
        with pytest.raises(BacktraceParseError) as exc_info:
            parse_backtrace(["a/b.rb:10:in `foo'", "not-a-valid-line"])

        assert exc_info.value.index == 1
        assert exc_info.value.line == "not-a-valid-line"

    def test_non_numeric_line_fails(self) -> None:
        with pytest.raises(BacktraceParseError):
            parse_backtrace(["a/b.rb:ten:in `foo'"])


class TestTryParseBacktrace:
    """Test the non-raising form used by the builder."""

    def test_returns_frames_for_valid_input(self) -> None:
        result = try_parse_backtrace(["a/b.rb:10:in `foo'"])
        assert result == [BacktraceFrame(file="a/b.rb", line="10", function="foo")]

    def test_returns_none_when_any_line_is_bad(self) -> None:
        assert try_parse_backtrace(["a/b.rb:10:in `foo'", "not-a-valid-line"]) is None
