"""Exception taxonomy for artifact sources.

Creation failures, input validation errors and remote commit failures are
the only errors the library raises. Absent files, directories, repositories
and pull requests are reported as ``None`` or empty results instead.
"""

from __future__ import annotations


class ArtifactSourceError(Exception):
    """Base class for every error raised by artifactsource."""


class ArtifactSourceCreationError(ArtifactSourceError):
    """A backing store could not be read or initialized."""


class CloneFailedError(ArtifactSourceCreationError):
    """``git clone`` exited non-zero, timed out or could not be started."""

    def __init__(self, message: str, return_code: int | None = None) -> None:
        super().__init__(message)
        self.return_code = return_code


class CommitNotFoundError(ArtifactSourceCreationError):
    """``git reset --hard <sha>`` failed after a successful clone.

    Usually the commit predates the history fetched by a shallow clone.
    """

    def __init__(self, sha: str, return_code: int | None = None) -> None:
        super().__init__(
            f"Failed to find commit with sha {sha}. Return code {return_code}"
        )
        self.sha = sha
        self.return_code = return_code


class ArtifactSourceValidationError(ArtifactSourceError, ValueError):
    """The caller supplied a structurally invalid argument."""


class CommitFailedError(ArtifactSourceError):
    """An atomic multi-file commit was rejected or could not reach the remote store."""


class RemoteOperationError(ArtifactSourceError):
    """A remote host call other than a commit failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
