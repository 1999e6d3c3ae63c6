"""Outcome of invoking ``git`` to produce a working copy."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from artifactsource.core.errors import (
    ArtifactSourceCreationError,
    CloneFailedError,
    CommitNotFoundError,
)

CloneStatus = Literal["cloned", "clone_failed", "commit_not_found", "setup_failed"]


class CloneResult(BaseModel):
    """Either the cloned directory or a diagnostic explaining the failure.

    ``return_code`` is the exit code of the failing git invocation, ``None``
    when git never ran to completion (timeout, missing executable, bad URL).
    """

    model_config = ConfigDict(frozen=True)

    status: CloneStatus
    path: Path | None = None
    message: str = ""
    return_code: int | None = None
    sha: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "cloned"

    def unwrap(self) -> Path:
        """Return the clone directory or raise the matching creation error."""
        if self.status == "cloned" and self.path is not None:
            return self.path
        if self.status == "commit_not_found":
            raise CommitNotFoundError(self.sha or "", return_code=self.return_code)
        if self.status == "clone_failed":
            raise CloneFailedError(self.message, return_code=self.return_code)
        raise ArtifactSourceCreationError(self.message)
