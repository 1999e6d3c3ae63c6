"""Main Typer application — imports and registers all CLI commands.

Entry point: ``artifactsource`` (configured via pyproject.toml console scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from artifactsource.cli.commands.clone import clone_cmd
from artifactsource.cli.commands.copy import copy_cmd
from artifactsource.cli.commands.diff import diff_cmd
from artifactsource.cli.commands.ls import ls_cmd
from artifactsource.cli.commands.sniff import sniff_cmd
from artifactsource.config import config

app = typer.Typer(
    name="artifactsource",
    help="artifactsource: read, diff and write immutable file trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="ls", help="List the files of a directory or zip.")(ls_cmd)
app.command(name="diff", help="Show the delta between two sources.")(diff_cmd)
app.command(name="copy", help="Materialize a source into a directory.")(copy_cmd)
app.command(name="clone", help="Shallow-clone a remote repository.")(clone_cmd)
app.command(name="sniff", help="Classify a file as binary or text.")(sniff_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
