"""Command-line interface for the trace converter.

Converts JSON request snapshots into detailed traces, mostly for inspecting
what the builder produces for a captured request.
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from apm_trace.converter import (
    FixedScorePolicy,
    InMemoryTraceStore,
    StaticEnvironment,
    Trace,
    TraceBuilder,
    TraceType,
    load_request,
    parse_backtrace,
)
from apm_trace.errors import BacktraceParseError, RequestSnapshotError

app = typer.Typer(help="Flatten call-frame trees into detailed traces")
console = Console()
err_console = Console(stderr=True)


@app.command(name="convert")
def convert_command(
    snapshot: Path = typer.Argument(..., help="JSON request snapshot to convert"),
    job: bool = typer.Option(False, "--job", help="File the trace as a job trace"),
    max_spans: Optional[int] = typer.Option(
        None, "--max-spans", min=1, help="Override the configured span limit"
    ),
    revision: Optional[str] = typer.Option(None, "--revision", help="Code revision to report"),
    host: Optional[str] = typer.Option(None, "--host", help="Hostname to report"),
    table: bool = typer.Option(False, "--table", help="Print a span table instead of JSON"),
    compact: bool = typer.Option(False, "--compact", help="Print JSON on a single line"),
) -> None:
    """Convert a request snapshot and print the resulting trace.

    Examples:
        apm-trace convert request.json
        apm-trace convert request.json --job --max-spans 100 --table
    """
    try:
        request = load_request(snapshot)
    except RequestSnapshotError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    environment = StaticEnvironment.from_settings()
    if revision is not None:
        environment = replace(environment, git_revision=revision)
    if host is not None:
        environment = replace(environment, hostname=host)

    store = InMemoryTraceStore()
    builder = TraceBuilder(request, FixedScorePolicy(), store, environment, max_spans=max_spans)
    builder.record(TraceType.JOB if job else TraceType.WEB)

    if not store.traces:
        err_console.print(
            f"[yellow]No trace built for {request.unique_name}: no root frame.[/yellow]"
        )
        raise typer.Exit(2)

    _, trace = store.traces[0]
    if table:
        _print_span_table(trace)
        return

    option = 0 if compact else orjson.OPT_INDENT_2
    typer.echo(orjson.dumps(trace.model_dump(mode="json"), option=option).decode())


@app.command(name="parse-backtrace")
def parse_backtrace_command(
    lines: list[str] = typer.Argument(..., help="Backtrace lines, innermost first"),
) -> None:
    """Parse Ruby backtrace lines into file/line/function records.

    Exits with status 1 if any line is malformed.
    """
    try:
        frames = parse_backtrace(lines)
    except BacktraceParseError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    payload = [frame.model_dump() for frame in frames]
    typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


def _print_span_table(trace: Trace) -> None:
    """Render a trace's spans as a rich table, indented by depth."""
    depth: dict[str, int] = {"": -1}

    table = Table(title=f"{trace.type.value} trace {trace.request_id} ({len(trace.spans)} spans)")
    table.add_column("Operation", style="green", no_wrap=True)
    table.add_column("Duration (ms)", style="cyan", justify="right", no_wrap=True)
    table.add_column("Span", style="magenta", overflow="fold")
    table.add_column("Tags", style="white", overflow="fold")

    for span in trace.spans:
        level = depth.get(span.parent_id, -1) + 1
        depth[span.span_id] = level
        duration_ms = (span.stop_time - span.start_time).total_seconds() * 1000
        tags = orjson.dumps(span.tags).decode()
        table.add_row(
            f"{'  ' * level}{span.operation}",
            f"{duration_ms:.2f}",
            span.span_id,
            tags[:120],
        )

    console.print(table)


if __name__ == "__main__":
    app()
