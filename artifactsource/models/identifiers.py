"""Identifiers describing where an artifact source came from.

An identifier carries enough information for a writer to target the same
location again (a filesystem root, a repository branch and commit, ...).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

MASTER_BRANCH = "master"


def _require_text(value: str | None, what: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{what} must not be null or blank")
    return value


class ArtifactSourceIdentifier(BaseModel):
    """Base class for all source identifiers."""

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        raise NotImplementedError


class SimpleIdentifier(ArtifactSourceIdentifier):
    """Identifier for sources built in memory."""

    label: str = "memory"

    @property
    def name(self) -> str:
        return self.label


class FileSystemIdentifier(ArtifactSourceIdentifier):
    """A directory on the local filesystem, optionally with a display label."""

    root: Path
    label: str | None = None

    @property
    def name(self) -> str:
        return self.label or self.root.name


class ZipIdentifier(ArtifactSourceIdentifier):
    """A zip archive read from bytes, a stream or a file."""

    label: str = "zip"

    @property
    def name(self) -> str:
        return self.label


class ResourceIdentifier(ArtifactSourceIdentifier):
    """A packaged resource (a directory or single file) under an anchor."""

    anchor: str
    resource_path: str

    @property
    def name(self) -> str:
        return self.resource_path.rstrip("/").rpartition("/")[2] or self.anchor


class RepoRef(ArtifactSourceIdentifier):
    """A repository on a remote host, addressed by ``owner/repo``."""

    repo: str
    owner: str

    @field_validator("repo", "owner")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _require_text(v, "Repository and owner")

    @property
    def name(self) -> str:
        return f"{self.owner}/{self.repo}"


class GitHubIdentifier(RepoRef):
    """A branch (and optionally a specific commit) of a remote repository.

    Sources read from a remote host carry the commit sha they were read at.
    """

    branch: str = MASTER_BRANCH
    commit_sha: str | None = None

    @field_validator("branch")
    @classmethod
    def _branch_not_blank(cls, v: str) -> str:
        return _require_text(v, "Branch")

    @property
    def repo_ref(self) -> RepoRef:
        return RepoRef(repo=self.repo, owner=self.owner)

    def at_commit(self, sha: str) -> GitHubIdentifier:
        return self.model_copy(update={"commit_sha": sha})

    @property
    def name(self) -> str:
        return f"{self.owner}/{self.repo}@{self.branch}"
