"""Read artifact sources from zip archives (including jars)."""

from __future__ import annotations

import io
import logging
import stat
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO, Union

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.core.filters import ArtifactFilter, apply
from artifactsource.models.artifacts import DEFAULT_MODE, EXECUTABLE_MODE, FileArtifact, normalize_path
from artifactsource.models.identifiers import ZipIdentifier

logger = logging.getLogger(__name__)

ZipInput = Union[bytes, BinaryIO, Path, str]

# RuntimeError: encrypted entry; NotImplementedError: unsupported compression
_READ_ERRORS = (
    zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError, OSError,
)


def _unix_mode(info: zipfile.ZipInfo) -> int:
    unix_mode = info.external_attr >> 16
    if unix_mode and unix_mode & stat.S_IXUSR:
        return EXECUTABLE_MODE
    return DEFAULT_MODE


def _safe_name(name: str) -> str | None:
    """Normalized entry name, or ``None`` for absolute or traversal names."""
    if name.startswith(("/", "\\")):
        return None
    try:
        return normalize_path(name)
    except ValueError:
        return None


class ZipFileArtifactSourceReader:
    """Reads every file entry of a zip archive into a cached source."""

    @staticmethod
    def from_zip_source(
        zip_input: ZipInput,
        *filters: ArtifactFilter,
        label: str | None = None,
    ) -> ArtifactSource:
        if isinstance(zip_input, (bytes, bytearray)):
            handle: BinaryIO | Path | str = io.BytesIO(zip_input)
        else:
            handle = zip_input
        if label is None:
            label = Path(zip_input).name if isinstance(zip_input, (Path, str)) else "zip"

        files = []
        try:
            with zipfile.ZipFile(handle) as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    path = _safe_name(info.filename)
                    if path is None:
                        logger.warning("Skipping unsafe zip entry %r", info.filename)
                        continue
                    files.append(
                        FileArtifact.from_bytes(path, archive.read(info), mode=_unix_mode(info))
                    )
        except _READ_ERRORS as e:
            raise ArtifactSourceCreationError(f"Failed to read zip source {label}: {e}") from e

        source = apply(ArtifactSource(ZipIdentifier(label=label), files), *filters)
        logger.debug("Read %d files from zip %s", len(source), label)
        return source
