"""levelsink CLI -- typer-based command interface.

Commands:
    levelsink routes               Show the level -> file routing table
    levelsink emit LEVEL MESSAGE   Append one event through the sink
"""

from __future__ import annotations

from pathlib import Path

import typer

from levelsink.cli._errors import handle_error
from levelsink.config import load_path_map
from levelsink.errors import SinkError
from levelsink.events import LogEvent
from levelsink.levels import Level
from levelsink.renderers import renderer_for
from levelsink.sink import LevelFileSink

app = typer.Typer(
    name="levelsink",
    help="Route log events to files by severity level.",
    no_args_is_help=True,
)


def _routes(paths_file: Path | None) -> dict[Level, str]:
    try:
        routes = load_path_map(paths_file)
    except ValueError as e:
        handle_error(str(e))
    if not routes:
        handle_error(
            "No level files configured. Pass --paths-file or set LEVELSINK_PATH_<LEVEL>."
        )
    return routes


def _parse_fields(pairs: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            handle_error(f"Invalid field {pair!r}, expected key=value")
        fields[key] = value
    return fields


@app.command("routes")
def routes(
    paths_file: Path = typer.Option(
        None, "--paths-file", "-p", help="YAML file mapping level names to paths"
    ),
) -> None:
    """Show the routing table, one level per line."""
    for level, destination in sorted(_routes(paths_file).items()):
        typer.echo(f"{level.label:<8} -> {destination}")


@app.command("emit")
def emit(
    level: str = typer.Argument(..., help="Level name, e.g. info or error"),
    message: str = typer.Argument(..., help="Event message"),
    field: list[str] = typer.Option(
        [], "--field", "-f", help="Extra key=value field (repeatable)"
    ),
    fmt: str = typer.Option(
        "console", "--format", help="Renderer: console, json, logfmt or keyvalue"
    ),
    paths_file: Path = typer.Option(
        None, "--paths-file", "-p", help="YAML file mapping level names to paths"
    ),
) -> None:
    """Append a single event to the file routed for LEVEL.

    Examples:
        levelsink emit info "service started" -f port=8080
        levelsink emit error "disk full" --format json -p paths.yaml
    """
    try:
        parsed = Level.parse(level)
        renderer = renderer_for(fmt, colors=True)
    except ValueError as e:
        handle_error(str(e))

    sink = LevelFileSink(_routes(paths_file))
    event = LogEvent(
        level=parsed,
        message=message,
        fields=_parse_fields(field),
        renderer=renderer,
    )
    try:
        sink.fire(event)
    except SinkError as e:
        handle_error(str(e))
    typer.echo(f"{parsed.label} -> {sink.paths[parsed]}")


def main() -> None:
    """Entry point for the levelsink CLI."""
    app()
