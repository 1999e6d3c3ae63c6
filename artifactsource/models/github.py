"""Value types exchanged with a remote git host."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from artifactsource.models.artifacts import DEFAULT_MODE


class Organization(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    name: str | None = None


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    owner: str
    default_branch: str = "master"
    private: bool = False
    html_url: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class TreeEntry(BaseModel):
    """One file of a remote tree: its path, mode and blob id."""

    model_config = ConfigDict(frozen=True)

    path: str
    sha: str
    mode: int = DEFAULT_MODE


class RemoteTree(BaseModel):
    """The files of a branch at a specific commit."""

    model_config = ConfigDict(frozen=True)

    commit_sha: str
    entries: tuple[TreeEntry, ...] = ()

    @property
    def paths(self) -> set[str]:
        return {e.path for e in self.entries}


class CommitResult(BaseModel):
    """Outcome of an atomic multi-file commit.

    ``blob_ids`` maps each written path to the blob id the host assigned.
    """

    model_config = ConfigDict(frozen=True)

    sha: str
    blob_ids: dict[str, str] = {}


class CommitInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
    parents: tuple[str, ...] = ()
    author: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PullRequestRequest(BaseModel):
    """What a pull request should contain: ``head`` merged into ``base``."""

    model_config = ConfigDict(frozen=True)

    title: str
    head: str
    base: str
    body: str = ""


class PullRequestBranch(BaseModel):
    model_config = ConfigDict(frozen=True)

    ref: str
    sha: str


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str
    state: str
    head: PullRequestBranch
    base: PullRequestBranch
    html_url: str
    merged: bool = False

    @property
    def is_open(self) -> bool:
        return self.state == "open"


class PullRequestMerge(BaseModel):
    model_config = ConfigDict(frozen=True)

    sha: str
    merged: bool
    message: str = ""


class ReviewComment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    body: str
    commit_id: str
    path: str
    position: int
