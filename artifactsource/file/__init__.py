"""Readers and writers for local stores: directories, zips and resources."""

from artifactsource.file.filesystem import (
    FileSystemArtifactSource,
    FileSystemArtifactSourceWriter,
    FileSystemGitArtifactSource,
)
from artifactsource.file.resources import ResourceArtifactSource
from artifactsource.file.zip_reader import ZipFileArtifactSourceReader

__all__ = [
    "FileSystemArtifactSource",
    "FileSystemArtifactSourceWriter",
    "FileSystemGitArtifactSource",
    "ResourceArtifactSource",
    "ZipFileArtifactSourceReader",
]
