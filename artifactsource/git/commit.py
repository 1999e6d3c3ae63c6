"""Translate deltas and explicit file lists into one multi-file commit.

Planning is pure: given the paths of the base tree, the files to write and
the paths to delete, ``plan_commit`` decides what a single atomic commit must
contain. Writing the plan is the job of a ``GitHost``.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from artifactsource.models.artifacts import FileArtifact, normalize_path
from artifactsource.models.delta import Delta


class CommitPlan(BaseModel):
    """The writes and deletions of one commit, disjoint by path."""

    model_config = ConfigDict(frozen=True)

    writes: tuple[FileArtifact, ...] = ()
    deletes: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.writes or self.deletes)


def dedupe_last_wins(files: Iterable[FileArtifact]) -> list[FileArtifact]:
    """Collapse files sharing a path to the last one supplied."""
    by_path: dict[str, FileArtifact] = {}
    for f in files:
        by_path[f.path] = f
    return list(by_path.values())


def _delete_path(item: FileArtifact | str) -> str | None:
    if isinstance(item, FileArtifact):
        return item.path
    try:
        return normalize_path(item)
    except ValueError:
        return None


def plan_commit(
    base_paths: Iterable[str],
    files: Iterable[FileArtifact],
    deletes: Iterable[FileArtifact | str] = (),
) -> CommitPlan:
    """Plan a commit from explicit lists.

    Deleting a path absent from the base tree is ignored. A path that is
    both written and deleted is written: adds win over deletes.
    """
    writes = dedupe_last_wins(files)
    written = {f.path for f in writes}
    existing = set(base_paths)

    delete_paths: dict[str, None] = {}
    for item in deletes:
        path = _delete_path(item)
        if path and path in existing and path not in written:
            delete_paths.setdefault(path)
    return CommitPlan(writes=tuple(writes), deletes=tuple(delete_paths))


def plan_from_delta(delta: Delta) -> CommitPlan:
    """Plan the commit that applies *delta* to its old side."""
    return CommitPlan(
        writes=tuple(delta.written_files),
        deletes=tuple(delta.removed_paths),
    )
