"""Metadata accompanying a write to a backing store."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from artifactsource.models.identifiers import GitHubIdentifier


class CommitAuthor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class SourceUpdateInfo(BaseModel):
    """A message describing why a source is being written."""

    model_config = ConfigDict(frozen=True)

    message: str


class GitHubSourceUpdateInfo(SourceUpdateInfo):
    """Commit metadata for a write to a remote repository branch."""

    locator: GitHubIdentifier
    author: CommitAuthor | None = None
