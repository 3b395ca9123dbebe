"""
reviewline.cli - Typer CLI entry point.

Exports review annotations to EDL, timeline XML and CSV, and converts
between seconds and timecode.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewline import __version__
from reviewline.config import (
    BUILTIN_PROFILES,
    CONFIG_FILENAME,
    ReviewlineConfig,
    create_default_config,
    load_config,
    write_config,
)
from reviewline.exceptions import ReviewlineError
from reviewline.io import read_json, write_text
from reviewline.logging import configure_logging
from reviewline.utils import format_duration, format_size

app = typer.Typer(
    name="reviewline",
    help="Timeline export for video review annotations.\n\n"
    "Turns time-coded review comments into EDL, marker XML and CSV files "
    "for DaVinci Resolve, Premiere Pro and other NLEs.",
    add_completion=False,
)
console = Console()


def find_project_dir() -> Path | None:
    """Find the project directory by looking for reviewline.yaml."""
    current = Path.cwd()
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return None


def load_project_config() -> tuple[Path | None, ReviewlineConfig | None]:
    project_dir = find_project_dir()
    if not project_dir:
        return None, None
    return project_dir, load_config(project_dir)


def load_annotation_file(path: Path) -> dict[str, Any]:
    """Read an annotations JSON file.

    Accepts either a bare list of records or an object with a "comments" or
    "annotations" list plus optional "title", "versionNumber" and
    "frameRate" keys.

    Returns:
        Dict with 'records' and whichever of 'title', 'version_number',
        'frame_rate' the file supplies
    """
    try:
        data = read_json(path)
    except UnicodeDecodeError as e:
        raise ReviewlineError(f"{path.name} is not valid UTF-8: {e.reason}") from e
    if isinstance(data, list):
        return {"records": data}
    if not isinstance(data, dict):
        raise ReviewlineError(f"{path.name} must contain a JSON array or object")

    records = data.get("comments", data.get("annotations"))
    if not isinstance(records, list):
        raise ReviewlineError(f"{path.name} has no 'comments' or 'annotations' list")

    loaded: dict[str, Any] = {"records": records}
    for key, target in (
        ("title", "title"),
        ("versionNumber", "version_number"),
        ("frameRate", "frame_rate"),
    ):
        if key in data:
            loaded[target] = data[key]
    return loaded


def first_set(*values: Any) -> Any:
    """Return the first value that is not None."""
    return next((v for v in values if v is not None), None)


def resolve_formats(value: str, config: ReviewlineConfig | None) -> list[str]:
    if value.strip().lower() == "all":
        return list(config.formats) if config else ["edl", "xml", "csv"]
    return [f.strip() for f in value.split(",") if f.strip()]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"reviewline {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Reviewline - timeline export for video review annotations."""
    configure_logging(verbose)


@app.command("init")
def init_project(
    name: str = typer.Argument(..., help="Project name"),
    profile: str = typer.Option(
        "film",
        "--profile",
        "-p",
        help="Frame-rate profile: film (24), pal (25), or ntsc (30)",
    ),
    path: str = typer.Option(".", "--path", "-d", help="Directory to create project in"),
) -> None:
    """Create a new Reviewline project with a reviewline.yaml."""
    project_path = Path(path) / name

    if project_path.exists():
        console.print(f"[red]Error: Directory '{escape(str(project_path))}' already exists[/red]")
        raise typer.Exit(1)

    if profile not in BUILTIN_PROFILES:
        console.print(f"[red]Error: Unknown profile '{escape(profile)}'[/red]")
        console.print(f"[dim]Valid profiles: {', '.join(BUILTIN_PROFILES)}[/dim]")
        raise typer.Exit(1)

    config = create_default_config(name, profile)
    write_config(config, project_path / CONFIG_FILENAME)

    console.print(f"[green]✓[/green] Created project '{escape(name)}' with profile '{profile}'")
    console.print(f"[dim]  {escape(str(project_path))}[/dim]")
    console.print("\nNext steps:")
    console.print(f"  cd {escape(name)}")
    console.print("  reviewline export <annotations.json>")


@app.command("export")
def export_timeline(
    annotations_file: Path = typer.Argument(..., help="Annotations JSON file"),
    format: str = typer.Option(
        "all",
        "--format",
        "-f",
        help="Export format(s): edl, xml, csv, comma-separated, or all",
    ),
    title: str | None = typer.Option(None, "--title", "-t", help="Project title"),
    version_number: int | None = typer.Option(
        None, "--version-number", "-n", help="Reviewed version number"
    ),
    fps: int | None = typer.Option(None, "--fps", "-r", help="Frame rate (integer)"),
    output_dir: str | None = typer.Option(None, "--output-dir", "-o", help="Output directory"),
    open_only: bool = typer.Option(
        False, "--open-only", help="Skip resolved annotations"
    ),
) -> None:
    """Export annotations to EDL, timeline XML and/or CSV.

    Command-line options override values in the annotations file, which
    override reviewline.yaml when run inside a project.
    """
    from reviewline.export.service import export_annotations, filter_annotations

    if not annotations_file.exists():
        console.print(f"[red]Error: File not found: {escape(str(annotations_file))}[/red]")
        raise typer.Exit(1)

    try:
        project_dir, config = load_project_config()
        loaded = load_annotation_file(annotations_file)
    except (ReviewlineError, json.JSONDecodeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    defaults = config or ReviewlineConfig()
    resolved_title = first_set(title, loaded.get("title"), defaults.project_name)
    resolved_version = first_set(
        version_number, loaded.get("version_number"), defaults.version_number
    )
    resolved_fps = first_set(fps, loaded.get("frame_rate"), defaults.frame_rate)
    include_resolved = defaults.include_resolved and not open_only

    if output_dir:
        out_dir = Path(output_dir)
    elif project_dir and config:
        out_dir = project_dir / config.output_dir
    else:
        out_dir = annotations_file.parent

    table = Table(title="Exports")
    table.add_column("Format", style="cyan")
    table.add_column("File", style="green")
    table.add_column("Type")
    table.add_column("Size", justify="right")

    try:
        annotations = filter_annotations(loaded["records"], include_resolved=include_resolved)
        documents = [
            export_annotations(fmt, resolved_title, resolved_version, annotations, resolved_fps)
            for fmt in resolve_formats(format, config)
        ]
    except ReviewlineError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    for document in documents:
        output_path = out_dir / document.filename
        write_text(output_path, document.content)
        table.add_row(
            document.format.value.upper(),
            str(output_path),
            document.mime_type,
            format_size(len(document.content.encode("utf-8"))),
        )

    console.print(table)
    console.print(
        f"[green]✓[/green] Exported {len(annotations)} annotations "
        f"at {resolved_fps} fps"
    )


@app.command("timecode")
def convert_timecode(
    value: str = typer.Argument(..., help="Seconds, or HH:MM:SS:FF with --reverse"),
    fps: int = typer.Option(24, "--fps", "-r", help="Frame rate (integer)"),
    reverse: bool = typer.Option(False, "--reverse", help="Convert timecode to seconds"),
) -> None:
    """Convert seconds to timecode, or timecode to seconds."""
    from reviewline.export.timecode import timecode_to_seconds, to_timecode

    try:
        if reverse:
            console.print(str(timecode_to_seconds(value, fps)))
        else:
            try:
                seconds = float(value)
            except ValueError:
                console.print(f"[red]Error: Not a number: {escape(value)}[/red]")
                raise typer.Exit(1)
            console.print(str(to_timecode(seconds, fps)))
    except ReviewlineError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command("validate")
def validate_annotations(
    annotations_file: Path = typer.Argument(..., help="Annotations JSON file"),
) -> None:
    """Validate an annotations file without exporting it."""
    from reviewline.models import normalize_annotations

    if not annotations_file.exists():
        console.print(f"[red]Error: File not found: {escape(str(annotations_file))}[/red]")
        raise typer.Exit(1)

    try:
        loaded = load_annotation_file(annotations_file)
        annotations = normalize_annotations(loaded["records"])
    except (ReviewlineError, json.JSONDecodeError) as e:
        console.print(f"[red]✗[/red] {annotations_file.name}: {escape(str(e))}")
        raise typer.Exit(1)

    resolved = sum(1 for a in annotations if a.is_resolved)
    console.print(f"[green]✓[/green] {annotations_file.name}: {len(annotations)} annotations")
    console.print(f"[dim]  open: {len(annotations) - resolved}, resolved: {resolved}[/dim]")
    if annotations:
        latest = max(a.end_seconds for a in annotations)
        console.print(f"[dim]  last annotation ends at {format_duration(latest)}[/dim]")


if __name__ == "__main__":
    app()
