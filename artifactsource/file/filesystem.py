"""Read artifact sources from, and write them to, the local filesystem."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.core.filters import ArtifactFilter, GitDirFilter, GitignoreFilter, apply
from artifactsource.models.artifacts import DEFAULT_MODE, EXECUTABLE_MODE, FileArtifact
from artifactsource.models.identifiers import FileSystemIdentifier
from artifactsource.models.updates import SourceUpdateInfo

logger = logging.getLogger(__name__)


def _mode_of(path: Path) -> int:
    return EXECUTABLE_MODE if path.stat().st_mode & stat.S_IXUSR else DEFAULT_MODE


class FileSystemArtifactSource:
    """Builds artifact sources from a directory tree.

    Files are uncached: their bytes are read from disk on access.
    """

    @staticmethod
    def from_identifier(
        fid: FileSystemIdentifier, *filters: ArtifactFilter
    ) -> ArtifactSource:
        root = Path(fid.root)
        if not root.is_dir():
            raise ArtifactSourceCreationError(
                f"File system root {root} does not exist or is not a directory"
            )

        files = []
        for path in sorted(root.rglob("*")):
            if path.is_symlink() or not path.is_file():
                continue
            rel = path.relative_to(root).as_posix()
            files.append(FileArtifact.lazy(rel, path.read_bytes, mode=_mode_of(path)))

        source = apply(ArtifactSource(fid, files), *filters)
        logger.debug("Read %d files from %s", len(source), root)
        return source

    @classmethod
    def from_path(cls, root: Path | str, *filters: ArtifactFilter) -> ArtifactSource:
        return cls.from_identifier(FileSystemIdentifier(root=Path(root)), *filters)


class FileSystemGitArtifactSource:
    """A working copy read without its ``.git`` directory and ignored files."""

    @staticmethod
    def from_identifier(
        fid: FileSystemIdentifier, *filters: ArtifactFilter
    ) -> ArtifactSource:
        root = Path(fid.root)
        if not root.is_dir():
            raise ArtifactSourceCreationError(
                f"File system root {root} does not exist or is not a directory"
            )
        return FileSystemArtifactSource.from_identifier(
            fid, GitDirFilter(), GitignoreFilter.from_root(root), *filters
        )


class FileSystemArtifactSourceWriter:
    """Materializes an artifact source under a root directory.

    Parent directories are created as needed and existing files are
    overwritten. The executable bit is applied where the platform has one.
    """

    def write(
        self,
        source: ArtifactSource,
        fid: FileSystemIdentifier,
        update_info: SourceUpdateInfo | None = None,
    ) -> Path:
        root = Path(fid.root)
        root.mkdir(parents=True, exist_ok=True)

        for f in source.all_files:
            target = root.joinpath(*f.path.split("/"))
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(f.content)
            if os.name == "posix":
                current = target.stat().st_mode
                if f.is_executable:
                    target.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
                else:
                    target.chmod(current & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))

        logger.info(
            "Wrote %d files from %s to %s%s",
            len(source),
            source.id.name,
            root,
            f" ({update_info.message})" if update_info else "",
        )
        return root
