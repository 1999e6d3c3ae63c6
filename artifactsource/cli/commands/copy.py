"""``artifactsource copy SRC DEST`` — materialize a source into a directory."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from artifactsource.core.errors import ArtifactSourceError
from artifactsource.cli.commands._sources import open_source
from artifactsource.file.filesystem import FileSystemArtifactSourceWriter
from artifactsource.models.identifiers import FileSystemIdentifier
from artifactsource.models.updates import SourceUpdateInfo

console = Console()


def copy_cmd(
    src: Path = typer.Argument(..., help="Directory or zip archive to copy."),
    dest: Path = typer.Argument(..., help="Target directory (created if missing)."),
    exclude: list[str] = typer.Option(
        [], "--exclude", "-x", help="Name pattern to exclude (repeatable)."
    ),
) -> None:
    """Write every file of SRC under DEST, overwriting existing files."""
    try:
        source = open_source(src, exclude)
    except ArtifactSourceError as e:
        console.print(f"[bold red]Cannot read source:[/bold red] {e}")
        raise typer.Exit(code=1)

    root = FileSystemArtifactSourceWriter().write(
        source, FileSystemIdentifier(root=dest), SourceUpdateInfo(message=f"copy of {src}")
    )
    console.print(f"[bold green]Copied {len(source)} files[/bold green] to {root}")
