"""Structural differences between two artifact sources."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict

from artifactsource.models.artifacts import FileArtifact


class FileAddition(BaseModel):
    """A file present only in the new source."""

    model_config = ConfigDict(frozen=True)

    file: FileArtifact

    @property
    def path(self) -> str:
        return self.file.path


class FileDeletion(BaseModel):
    """A file present only in the old source."""

    model_config = ConfigDict(frozen=True)

    file: FileArtifact

    @property
    def path(self) -> str:
        return self.file.path


class FileUpdate(BaseModel):
    """A file present in both sources with different content or mode."""

    model_config = ConfigDict(frozen=True)

    old: FileArtifact
    new: FileArtifact

    @property
    def path(self) -> str:
        return self.new.path

    @property
    def mode_changed(self) -> bool:
        return self.old.mode != self.new.mode


Change = Union[FileAddition, FileDeletion, FileUpdate]


class Delta(BaseModel):
    """Additions, removals and updates between an old and a new source.

    The three groups are disjoint by path. A delta is empty exactly when
    the two sources are structurally equal.
    """

    model_config = ConfigDict(frozen=True)

    additions: tuple[FileArtifact, ...] = ()
    removals: tuple[FileArtifact, ...] = ()
    updates: tuple[FileUpdate, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.additions or self.removals or self.updates)

    @property
    def deltas(self) -> list[Change]:
        """All changes as individual records: additions, removals, updates."""
        changes: list[Change] = [FileAddition(file=f) for f in self.additions]
        changes.extend(FileDeletion(file=f) for f in self.removals)
        changes.extend(self.updates)
        return changes

    @property
    def added_paths(self) -> list[str]:
        return [f.path for f in self.additions]

    @property
    def removed_paths(self) -> list[str]:
        return [f.path for f in self.removals]

    @property
    def updated_paths(self) -> list[str]:
        return [u.path for u in self.updates]

    @property
    def written_files(self) -> list[FileArtifact]:
        """Files a writer must put: additions followed by updated files."""
        return [*self.additions, *(u.new for u in self.updates)]

    def reversed(self) -> Delta:
        """The delta from new back to old."""
        return Delta(
            additions=self.removals,
            removals=self.additions,
            updates=tuple(FileUpdate(old=u.new, new=u.old) for u in self.updates),
        )

    def __len__(self) -> int:
        return len(self.additions) + len(self.removals) + len(self.updates)
