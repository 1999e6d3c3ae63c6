"""Immutable, path-addressed trees of file artifacts.

An ``ArtifactSource`` holds an ordered mapping of path -> ``FileArtifact``.
Directories are derived from file path prefixes and never stored. Every
transform returns a new source; file artifacts that a transform leaves
untouched are shared with the source they came from.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, ValuesView
from functools import cached_property
from typing import TYPE_CHECKING

from artifactsource.models.artifacts import (
    Artifact,
    DirectoryArtifact,
    FileArtifact,
    ancestors_of,
    normalize_path,
)
from artifactsource.models.identifiers import ArtifactSourceIdentifier, SimpleIdentifier

if TYPE_CHECKING:
    from artifactsource.models.delta import Delta

DirectoryPredicate = Callable[[DirectoryArtifact], bool]
FilePredicate = Callable[[FileArtifact], bool]


def _clean(path: str) -> str | None:
    try:
        return normalize_path(path)
    except ValueError:
        return None


class ArtifactSource:
    """An immutable snapshot of a tree of files.

    Parameters
    ----------
    identifier:
        Where the tree came from.  Defaults to an in-memory identifier.
    files:
        The files of the tree.  When a path occurs more than once the last
        occurrence wins; its position is that of the first occurrence.
    """

    def __init__(
        self,
        identifier: ArtifactSourceIdentifier | None = None,
        files: Iterable[FileArtifact] = (),
    ) -> None:
        index: dict[str, FileArtifact] = {}
        for f in files:
            index[f.path] = f
        self._id = identifier or SimpleIdentifier()
        self._files = index

    @classmethod
    def _wrap(
        cls, identifier: ArtifactSourceIdentifier, index: dict[str, FileArtifact]
    ) -> ArtifactSource:
        source = cls.__new__(cls)
        source._id = identifier
        source._files = index
        return source

    @classmethod
    def of(cls, *files: FileArtifact, label: str = "memory") -> ArtifactSource:
        """Convenience constructor for an in-memory source."""
        return cls(SimpleIdentifier(label=label), files)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def id(self) -> ArtifactSourceIdentifier:
        return self._id

    @property
    def all_files(self) -> ValuesView[FileArtifact]:
        """All files in insertion order.

        The view is lazy and can be iterated any number of times.
        """
        return self._files.values()

    @property
    def paths(self) -> list[str]:
        return list(self._files)

    @cached_property
    def _directory_paths(self) -> dict[str, None]:
        dirs: dict[str, None] = {}
        for path in self._files:
            for ancestor in ancestors_of(path):
                dirs.setdefault(ancestor)
        return dirs

    @property
    def directories(self) -> list[DirectoryArtifact]:
        return [DirectoryArtifact(path=p) for p in self._directory_paths]

    @property
    def artifacts(self) -> list[Artifact]:
        """Every directory and file, each directory before its first file."""
        seen: set[str] = set()
        result: list[Artifact] = []
        for path, f in self._files.items():
            for ancestor in ancestors_of(path):
                if ancestor not in seen:
                    seen.add(ancestor)
                    result.append(DirectoryArtifact(path=ancestor))
            result.append(f)
        return result

    def find_file(self, path: str) -> FileArtifact | None:
        clean = _clean(path)
        return self._files.get(clean) if clean else None

    def find_directory(self, path: str) -> DirectoryArtifact | None:
        clean = _clean(path)
        if clean is None or clean not in self._directory_paths:
            return None
        return DirectoryArtifact(path=clean)

    @property
    def empty(self) -> bool:
        return not self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[FileArtifact]:
        return iter(self._files.values())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.find_file(path) is not None

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def with_id(self, identifier: ArtifactSourceIdentifier) -> ArtifactSource:
        return self._wrap(identifier, self._files)

    def __add__(self, other: Iterable[Artifact] | ArtifactSource) -> ArtifactSource:
        """Insert or overwrite files by path; directories are ignored."""
        if isinstance(other, FileArtifact):
            other = [other]
        elif not isinstance(other, Iterable):
            return NotImplemented
        index = dict(self._files)
        for artifact in other:
            if isinstance(artifact, FileArtifact):
                index[artifact.path] = artifact
        return self._wrap(self._id, index)

    def delete(self, path: str) -> ArtifactSource:
        """Remove the file at *path*, or every file under directory *path*.

        Deleting a path that is not present returns this source unchanged.
        """
        clean = _clean(path)
        if clean is None:
            return self
        if clean in self._files:
            index = dict(self._files)
            del index[clean]
            return self._wrap(self._id, index)
        if clean in self._directory_paths:
            prefix = clean + "/"
            index = {p: f for p, f in self._files.items() if not p.startswith(prefix)}
            return self._wrap(self._id, index)
        return self

    def filter(
        self,
        dir_predicate: DirectoryPredicate | None = None,
        file_predicate: FilePredicate | None = None,
    ) -> ArtifactSource:
        """Keep files passing *file_predicate* whose every ancestor passes *dir_predicate*."""
        verdicts: dict[str, bool] = {}

        def dir_ok(path: str) -> bool:
            if dir_predicate is None:
                return True
            if path not in verdicts:
                verdicts[path] = bool(dir_predicate(DirectoryArtifact(path=path)))
            return verdicts[path]

        index = {
            p: f
            for p, f in self._files.items()
            if all(dir_ok(a) for a in ancestors_of(p))
            and (file_predicate is None or file_predicate(f))
        }
        return self._wrap(self._id, index)

    def __truediv__(self, sub_path: str) -> ArtifactSource:
        """The sub-tree under *sub_path*, with paths relative to it."""
        clean = _clean(sub_path)
        if clean is None:
            return self._wrap(self._id, {})
        prefix = clean + "/"
        index: dict[str, FileArtifact] = {}
        for p, f in self._files.items():
            if p.startswith(prefix):
                rel = p[len(prefix):]
                index[rel] = f.with_path(rel)
        return self._wrap(self._id, index)

    def cached(self) -> ArtifactSource:
        """An equivalent source whose file contents are all held in memory."""
        if all(f.is_cached for f in self._files.values()):
            return self
        return self._wrap(self._id, {p: f.cached() for p, f in self._files.items()})

    def delta_to(self, new: ArtifactSource) -> Delta:
        """The changes that turn this source into *new*."""
        from artifactsource.core.differ import delta

        return delta(self, new)

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArtifactSource):
            return NotImplemented
        if self._files.keys() != other._files.keys():
            return False
        return all(f.same_content(other._files[p]) for p, f in self._files.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ArtifactSource(id={self._id.name!r}, files={len(self._files)})"
