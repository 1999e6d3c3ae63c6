"""The ``GitHost`` protocol: the operations a remote git host must offer.

Backends:

1. ``GitHubClient`` — the GitHub REST API over a ``requests`` session.
2. ``InMemoryGitHost`` — a process-local host for tests and offline use.

Hosts are explicit handles: the caller creates one, passes it where it is
needed and closes it when done. Every "not found" condition is reported as
``None`` (or an empty list), never as an exception.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from artifactsource.models.artifacts import FileArtifact
from artifactsource.models.github import (
    CommitInfo,
    CommitResult,
    Organization,
    PullRequest,
    PullRequestMerge,
    PullRequestRequest,
    RemoteTree,
    Repository,
    ReviewComment,
)
from artifactsource.models.updates import CommitAuthor


@runtime_checkable
class GitHost(Protocol):
    """Protocol for remote git hosting backends."""

    def get_organization(self, name: str) -> Organization | None:
        ...

    def get_repository(self, repo: str, owner: str) -> Repository | None:
        ...

    def create_repository(
        self, repo: str, owner: str, *, auto_init: bool = False, private: bool = False
    ) -> Repository:
        ...

    def branch_head(self, repo: str, owner: str, branch: str) -> str | None:
        """Commit sha at the tip of *branch*, or ``None`` if it does not exist."""
        ...

    def create_branch(self, repo: str, owner: str, branch: str, from_branch: str) -> str:
        """Create *branch* at the tip of *from_branch* and return its sha."""
        ...

    def read_tree(self, repo: str, owner: str, ref: str) -> RemoteTree | None:
        """Files at *ref* (a branch name or commit sha)."""
        ...

    def read_blob(self, repo: str, owner: str, sha: str) -> bytes:
        ...

    def commit_files(
        self,
        repo: str,
        owner: str,
        branch: str,
        message: str,
        writes: Sequence[FileArtifact],
        deletes: Sequence[str],
        *,
        parent_sha: str | None,
        author: CommitAuthor | None = None,
    ) -> CommitResult:
        """Apply *writes* and *deletes* to *branch* as one commit.

        *parent_sha* must be the current tip of the branch; ``None`` creates
        the branch with a root commit.  Raises ``CommitFailedError`` when the
        host rejects the commit or cannot be reached mid-commit; nothing is
        applied in that case.
        """
        ...

    def list_commits(self, repo: str, owner: str, sha: str) -> list[CommitInfo]:
        """Commits reachable from *sha*, newest first."""
        ...

    def create_pull_request(
        self, repo: str, owner: str, request: PullRequestRequest
    ) -> PullRequest:
        ...

    def get_pull_request(self, repo: str, owner: str, number: int) -> PullRequest | None:
        ...

    def list_pull_requests(
        self, repo: str, owner: str, state: str = "open"
    ) -> list[PullRequest]:
        ...

    def merge_pull_request(
        self, repo: str, owner: str, number: int, title: str, message: str
    ) -> PullRequestMerge | None:
        ...

    def create_review_comment(
        self,
        repo: str,
        owner: str,
        number: int,
        body: str,
        commit_id: str,
        path: str,
        position: int,
    ) -> ReviewComment:
        ...

    def close(self) -> None:
        ...
