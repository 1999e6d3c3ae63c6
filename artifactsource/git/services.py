"""High-level operations on remote repositories.

``GitHubServices`` wraps a ``GitHost`` handle: it reads branches as artifact
sources, turns explicit file lists or deltas into single atomic commits and
drives pull requests. It never retries: a caller that wants to retry a
rejected commit must re-read the base and recompute its changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import partial

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.differ import delta
from artifactsource.core.errors import ArtifactSourceCreationError, ArtifactSourceValidationError
from artifactsource.git.commit import plan_commit, plan_from_delta
from artifactsource.git.host import GitHost
from artifactsource.models.artifacts import FileArtifact
from artifactsource.models.github import (
    CommitInfo,
    Organization,
    PullRequest,
    PullRequestMerge,
    PullRequestRequest,
    Repository,
    ReviewComment,
)
from artifactsource.models.identifiers import GitHubIdentifier
from artifactsource.models.updates import GitHubSourceUpdateInfo

logger = logging.getLogger(__name__)


def _require(value: str | None, what: str) -> str:
    if value is None or not str(value).strip():
        raise ArtifactSourceValidationError(f"{what} must not be null or blank")
    return value


class GitHubServices:
    """Artifact-source operations against a remote git host.

    Parameters
    ----------
    host:
        The host handle.  Its lifecycle belongs to the caller.
    """

    def __init__(self, host: GitHost) -> None:
        self._host = host

    @property
    def host(self) -> GitHost:
        return self._host

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_organization(self, name: str) -> Organization | None:
        return self._host.get_organization(_require(name, "Organization"))

    def get_repository(self, repo: str, owner: str) -> Repository | None:
        _require(repo, "Repository")
        _require(owner, "Owner")
        return self._host.get_repository(repo, owner)

    def list_commits(self, repo: str, owner: str, sha: str) -> list[CommitInfo]:
        return self._host.list_commits(repo, owner, _require(sha, "Commit sha"))

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def source_for(self, locator: GitHubIdentifier) -> ArtifactSource:
        """Read a branch (or a specific commit) as an artifact source.

        File contents are fetched on first access.  The returned source's id
        carries the commit sha that was read.
        """
        ref = locator.commit_sha or locator.branch
        tree = self._host.read_tree(locator.repo, locator.owner, ref)
        if tree is None:
            raise ArtifactSourceCreationError(
                f"Failed to read {locator.owner}/{locator.repo} at {ref}"
            )
        files = [
            FileArtifact.lazy(
                entry.path,
                partial(self._host.read_blob, locator.repo, locator.owner, entry.sha),
                mode=entry.mode,
                unique_id=entry.sha,
            )
            for entry in tree.entries
        ]
        logger.debug("Read %d files from %s at %s", len(files), locator.name, tree.commit_sha[:7])
        return ArtifactSource(locator.at_commit(tree.commit_sha), files)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def create_branch(self, repo: str, owner: str, branch: str, from_branch: str) -> str:
        _require(branch, "Branch")
        return self._host.create_branch(repo, owner, branch, _require(from_branch, "Branch"))

    def commit_files(
        self,
        update_info: GitHubSourceUpdateInfo,
        files: Iterable[FileArtifact],
        files_to_delete: Iterable[FileArtifact | str] = (),
    ) -> list[FileArtifact]:
        """Write *files* and delete *files_to_delete* in one commit.

        Returns the written files, deduplicated by path (last wins), each
        carrying the ``unique_id`` the host assigned.  Nothing is committed
        when there is nothing to change.

        Raises
        ------
        CommitFailedError
            The host rejected the commit.
        """
        loc = update_info.locator
        base = self._host.read_tree(loc.repo, loc.owner, loc.branch)
        plan = plan_commit(base.paths if base else (), files, files_to_delete)
        if plan.is_empty:
            logger.info("Nothing to commit to %s", loc.name)
            return []

        result = self._host.commit_files(
            loc.repo,
            loc.owner,
            loc.branch,
            update_info.message,
            plan.writes,
            plan.deletes,
            parent_sha=base.commit_sha if base else None,
            author=update_info.author,
        )
        return [f.with_unique_id(result.blob_ids[f.path]) for f in plan.writes]

    def commit_delta(
        self,
        update_info: GitHubSourceUpdateInfo,
        base: ArtifactSource,
        target: ArtifactSource,
    ) -> list[FileArtifact]:
        """Commit the changes that turn *base* into *target*."""
        plan = plan_from_delta(delta(base, target))
        return self.commit_files(update_info, plan.writes, plan.deletes)

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    def create_pull_request(
        self, repo: str, owner: str, request: PullRequestRequest
    ) -> PullRequest:
        return self._host.create_pull_request(repo, owner, request)

    def create_pull_request_from_changes(
        self,
        repo: str,
        owner: str,
        request: PullRequestRequest,
        old: ArtifactSource,
        new: ArtifactSource,
        message: str,
    ) -> PullRequest | None:
        """Branch ``request.head`` off ``request.base``, commit *old* -> *new*, open a PR.

        Returns ``None`` when *old* and *new* are equal.
        """
        if delta(old, new).is_empty:
            logger.info("No changes between sources; not opening a pull request")
            return None
        self.create_branch(repo, owner, request.head, request.base)
        head = GitHubIdentifier(repo=repo, owner=owner, branch=request.head)
        self.commit_delta(GitHubSourceUpdateInfo(locator=head, message=message), old, new)
        return self._host.create_pull_request(repo, owner, request)

    def get_pull_request(self, repo: str, owner: str, number: int) -> PullRequest | None:
        return self._host.get_pull_request(repo, owner, number)

    def list_pull_requests(
        self, repo: str, owner: str, state: str = "open"
    ) -> list[PullRequest]:
        return self._host.list_pull_requests(repo, owner, state)

    def merge_pull_request(
        self, repo: str, owner: str, number: int, title: str, message: str
    ) -> PullRequestMerge | None:
        return self._host.merge_pull_request(repo, owner, number, title, message)

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
        return self._host.create_review_comment(
            repo, owner, number, body, commit_id, path, position
        )
