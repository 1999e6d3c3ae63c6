"""File and directory artifacts (immutable).

A ``FileArtifact`` is either *cached* (its bytes are held in ``data``) or
*uncached* (its bytes are produced on demand by ``loader``). Directories are
never stored; ``DirectoryArtifact`` values are derived from file paths.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_MODE = 0o100644
EXECUTABLE_MODE = 0o100755


def normalize_path(path: str) -> str:
    """Return *path* as a clean, slash-separated, root-relative path.

    Backslashes become slashes and leading/trailing slashes are dropped.
    Empty paths and ``.``/``..`` segments are rejected with ``ValueError``.
    """
    if path is None:
        raise ValueError("Path must not be None")
    parts = [p for p in path.replace("\\", "/").split("/") if p]
    if not parts:
        raise ValueError(f"Invalid empty path {path!r}")
    for part in parts:
        if part in (".", ".."):
            raise ValueError(f"Relative path segment not allowed: {path!r}")
    return "/".join(parts)


def parent_of(path: str) -> str:
    """Parent directory of *path*, ``""`` for top-level entries."""
    head, _, _ = path.rpartition("/")
    return head


def ancestors_of(path: str) -> list[str]:
    """All proper ancestor directories of *path*, outermost first."""
    parts = path.split("/")[:-1]
    return ["/".join(parts[: i + 1]) for i in range(len(parts))]


class FileArtifact(BaseModel):
    """An immutable file at ``path`` within an artifact source.

    Exactly one of ``data`` and ``loader`` is set. ``unique_id`` is assigned
    by a remote store after a successful write.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str
    mode: int = DEFAULT_MODE
    unique_id: str | None = None
    data: bytes | None = Field(default=None, repr=False)
    loader: Callable[[], bytes] | None = Field(default=None, exclude=True, repr=False)

    @field_validator("path")
    @classmethod
    def _clean_path(cls, v: str) -> str:
        return normalize_path(v)

    @model_validator(mode="after")
    def _one_content_source(self) -> FileArtifact:
        if (self.data is None) == (self.loader is None):
            raise ValueError(
                f"FileArtifact {self.path!r} needs exactly one of data or loader"
            )
        return self

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_string(
        cls, path: str, text: str, *, mode: int = DEFAULT_MODE, encoding: str = "utf-8"
    ) -> FileArtifact:
        return cls(path=path, data=text.encode(encoding), mode=mode)

    @classmethod
    def from_bytes(
        cls, path: str, data: bytes, *, mode: int = DEFAULT_MODE, unique_id: str | None = None
    ) -> FileArtifact:
        return cls(path=path, data=data, mode=mode, unique_id=unique_id)

    @classmethod
    def lazy(
        cls,
        path: str,
        loader: Callable[[], bytes],
        *,
        mode: int = DEFAULT_MODE,
        unique_id: str | None = None,
    ) -> FileArtifact:
        """An uncached file whose bytes are read by *loader* on each access."""
        return cls(path=path, loader=loader, mode=mode, unique_id=unique_id)

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.path.rpartition("/")[2]

    @property
    def parent_path(self) -> str:
        return parent_of(self.path)

    @property
    def content(self) -> bytes:
        if self.data is not None:
            return self.data
        return self.loader()  # type: ignore[misc]

    @property
    def content_length(self) -> int:
        return len(self.content)

    @property
    def is_cached(self) -> bool:
        return self.data is not None

    @property
    def is_executable(self) -> bool:
        return bool(self.mode & 0o111)

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding)

    # ------------------------------------------------------------------
    # Transforms (each returns a new artifact)
    # ------------------------------------------------------------------

    def cached(self) -> FileArtifact:
        """Return an equivalent artifact with its content held in memory."""
        if self.is_cached:
            return self
        return self.model_copy(update={"data": self.content, "loader": None})

    def with_unique_id(self, unique_id: str) -> FileArtifact:
        return self.model_copy(update={"unique_id": unique_id})

    def with_path(self, path: str) -> FileArtifact:
        return self.model_copy(update={"path": normalize_path(path)})

    def same_content(self, other: FileArtifact) -> bool:
        """True if *other* has byte-identical content and the same mode."""
        return self.mode == other.mode and self.content == other.content


class DirectoryArtifact(BaseModel):
    """A directory, present because at least one file lives beneath it."""

    model_config = ConfigDict(frozen=True)

    path: str

    @field_validator("path")
    @classmethod
    def _clean_path(cls, v: str) -> str:
        return normalize_path(v)

    @property
    def name(self) -> str:
        return self.path.rpartition("/")[2]

    @property
    def parent_path(self) -> str:
        return parent_of(self.path)


Artifact = Union[FileArtifact, DirectoryArtifact]
