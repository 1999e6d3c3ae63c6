"""``artifactsource clone OWNER REPO`` — shallow-clone a repository."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from artifactsource.config import config
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.git.cloner import GitRepositoryCloner

console = Console()


def clone_cmd(
    owner: str = typer.Argument(..., help="Repository owner or organization."),
    repo: str = typer.Argument(..., help="Repository name."),
    branch: str = typer.Option(None, "--branch", "-b", help="Branch to check out."),
    sha: str = typer.Option(None, "--sha", help="Commit to reset the clone to."),
    depth: int = typer.Option(None, "--depth", "-d", help="History depth to fetch."),
    directory: Path = typer.Option(None, "--dir", help="Clone into this directory."),
) -> None:
    """Clone OWNER/REPO and print the directory it was cloned into."""
    cloner = GitRepositoryCloner(config.github_token)
    try:
        path = cloner.clone_directory(repo, owner, branch, sha, directory, depth)
    except ArtifactSourceCreationError as e:
        console.print(f"[bold red]Clone failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    # Print the path plainly for scripting
    console.print(str(path))
