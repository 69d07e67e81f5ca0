"""Tests for the apm-trace CLI."""

from pathlib import Path

import orjson
from typer.testing import CliRunner

from apm_trace.cli import app

runner = CliRunner()


def _snapshot(tmp_path: Path, children: int = 2, with_root: bool = True) -> Path:
    payload: dict = {
        "unique_name": "Controller/users/index",
        "web": True,
        "annotations": {"uri": "/users"},
        "context": {"user_id": 42},
    }
    if with_root:
        payload["root"] = {
            "operation": "Controller/users/index",
            "start_time": "2026-03-14T12:00:00Z",
            "stop_time": "2026-03-14T12:00:00.100Z",
            "children": [
                {
                    "operation": f"SQL/User/find{i}",
                    "start_time": "2026-03-14T12:00:00.010Z",
                    "stop_time": "2026-03-14T12:00:00.020Z",
                }
                for i in range(children)
            ],
        }
    path = tmp_path / "request.json"
    path.write_bytes(orjson.dumps(payload))
    return path


class TestConvertCommand:
    """Test `apm-trace convert`."""

    def test_prints_trace_json(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["convert", str(_snapshot(tmp_path)), "--revision", "abc123", "--host", "web-01"],
        )

        assert result.exit_code == 0, result.output
        trace = orjson.loads(result.stdout)
        assert trace["request_id"].startswith("req-")
        assert trace["revision"] == "abc123"
        assert trace["host"] == "web-01"
        assert trace["type"] == "Web"
        assert trace["path"] == "/users"
        assert trace["code"] == ""
        assert trace["tags"]["user_id"] == 42
        assert [s["operation"] for s in trace["spans"]] == [
            "Controller/users/index",
            "SQL/User/find0",
            "SQL/User/find1",
        ]

    def test_job_flag(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["convert", str(_snapshot(tmp_path)), "--job", "--compact"])

        assert result.exit_code == 0, result.output
        # Type comes from the request itself, not the store category
        assert orjson.loads(result.stdout)["type"] == "Web"

    def test_max_spans_override(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["convert", str(_snapshot(tmp_path, children=10)), "--max-spans", "3", "--compact"]
        )

        assert result.exit_code == 0, result.output
        assert len(orjson.loads(result.stdout)["spans"]) == 4

    def test_table_output(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["convert", str(_snapshot(tmp_path)), "--table"])

        assert result.exit_code == 0, result.output
        assert "SQL/User/find0" in result.stdout

    def test_missing_root_exits_2(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["convert", str(_snapshot(tmp_path, with_root=False))])
        assert result.exit_code == 2

    def test_bad_snapshot_exits_1(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        result = runner.invoke(app, ["convert", str(path)])

        assert result.exit_code == 1


class TestParseBacktraceCommand:
    """Test `apm-trace parse-backtrace`."""

    def test_parses_lines(self) -> None:
        result = runner.invoke(app, ["parse-backtrace", "a/b.rb:10:in `foo'"])

        assert result.exit_code == 0, result.output
        assert orjson.loads(result.stdout) == [{"file": "a/b.rb", "line": "10", "function": "foo"}]

    def test_bad_line_exits_1(self) -> None:
        result = runner.invoke(app, ["parse-backtrace", "a/b.rb:10:in `foo'", "not-a-valid-line"])
        assert result.exit_code == 1
