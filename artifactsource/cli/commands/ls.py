"""``artifactsource ls PATH`` — list the files of a directory or zip source."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from artifactsource.config import config
from artifactsource.core.binary import is_binary_content
from artifactsource.core.errors import ArtifactSourceError
from artifactsource.cli.commands._sources import format_mode, open_source

console = Console()


def ls_cmd(
    path: Path = typer.Argument(..., help="Directory or zip archive to list."),
    exclude: list[str] = typer.Option(
        [], "--exclude", "-x", help="Name pattern to exclude (repeatable)."
    ),
) -> None:
    """List every file with its size, mode and content kind."""
    try:
        source = open_source(path, exclude)
    except ArtifactSourceError as e:
        console.print(f"[bold red]Cannot read source:[/bold red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"{source.id.name} ({len(source)} files)")
    table.add_column("Path", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Mode")
    table.add_column("Kind")

    for f in source.all_files:
        content = f.content
        kind = "binary" if is_binary_content(content, config.binary_sample_size) else "text"
        table.add_row(f.path, str(len(content)), format_mode(f.mode), kind)

    console.print(table)
