"""``artifactsource sniff FILE`` — classify content as binary or text."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from artifactsource.config import config
from artifactsource.core.binary import is_binary_content

console = Console()


def sniff_cmd(
    file: Path = typer.Argument(..., help="File to classify."),
) -> None:
    """Print ``binary`` or ``text`` for FILE, judged by content only."""
    if not file.is_file():
        console.print(f"[bold red]Not a file:[/bold red] {file}")
        raise typer.Exit(code=1)
    data = file.read_bytes()
    console.print("binary" if is_binary_content(data, config.binary_sample_size) else "text")
