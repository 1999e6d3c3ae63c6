"""Shared helpers: open a directory or zip archive named on the command line."""

from __future__ import annotations

import zipfile
from pathlib import Path

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.filters import GitDirFilter, NamePatternFilter
from artifactsource.file.filesystem import FileSystemArtifactSource
from artifactsource.file.zip_reader import ZipFileArtifactSourceReader


def open_source(path: Path, exclude: list[str] | None = None) -> ArtifactSource:
    """Read *path* as a directory or zip source, skipping ``.git``.

    Raises ``ArtifactSourceCreationError`` when *path* cannot be read.
    """
    filters = [GitDirFilter()]
    if exclude:
        filters.append(NamePatternFilter(exclude, exclude))
    if path.is_file() and zipfile.is_zipfile(path):
        return ZipFileArtifactSourceReader.from_zip_source(path, *filters)
    return FileSystemArtifactSource.from_path(path, *filters)


def format_mode(mode: int) -> str:
    return f"{mode:06o}"
