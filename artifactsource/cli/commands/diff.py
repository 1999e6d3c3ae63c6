"""``artifactsource diff OLD NEW`` — show the delta between two sources."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from artifactsource.core.differ import delta
from artifactsource.core.errors import ArtifactSourceError
from artifactsource.cli.commands._sources import format_mode, open_source

console = Console()


def diff_cmd(
    old: Path = typer.Argument(..., help="The old directory or zip archive."),
    new: Path = typer.Argument(..., help="The new directory or zip archive."),
    exclude: list[str] = typer.Option(
        [], "--exclude", "-x", help="Name pattern to exclude (repeatable)."
    ),
) -> None:
    """Print added, removed and updated files.

    Exits with code 1 when the sources differ, 0 when they are equal.
    """
    try:
        old_source = open_source(old, exclude)
        new_source = open_source(new, exclude)
    except ArtifactSourceError as e:
        console.print(f"[bold red]Cannot read source:[/bold red] {e}")
        raise typer.Exit(code=2)

    changes = delta(old_source, new_source)
    if changes.is_empty:
        console.print("[green]No differences.[/green]")
        return

    for f in changes.additions:
        console.print(f"[green]+ {f.path}[/green]")
    for f in changes.removals:
        console.print(f"[red]- {f.path}[/red]")
    for u in changes.updates:
        note = (
            f" [dim](mode {format_mode(u.old.mode)} -> {format_mode(u.new.mode)})[/dim]"
            if u.mode_changed
            else ""
        )
        console.print(f"[yellow]~ {u.path}[/yellow]{note}")

    console.print(
        f"\n[bold]{len(changes.additions)}[/bold] added, "
        f"[bold]{len(changes.removals)}[/bold] removed, "
        f"[bold]{len(changes.updates)}[/bold] updated"
    )
    raise typer.Exit(code=1)
