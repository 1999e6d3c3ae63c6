"""Read artifact sources from packaged resources.

A resource path is resolved against an *anchor*: an importable package name,
or any traversable (``importlib.resources.abc.Traversable``, ``pathlib.Path``).
"""

from __future__ import annotations

import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.core.filters import ArtifactFilter, apply
from artifactsource.models.artifacts import FileArtifact
from artifactsource.models.identifiers import ResourceIdentifier

logger = logging.getLogger(__name__)


def _walk(node: Traversable, prefix: str) -> list[FileArtifact]:
    files = []
    for child in sorted(node.iterdir(), key=lambda c: c.name):
        rel = f"{prefix}{child.name}"
        if child.is_dir():
            files.extend(_walk(child, rel + "/"))
        elif child.is_file():
            files.append(FileArtifact.lazy(rel, child.read_bytes))
    return files


class ResourceArtifactSource:
    """Builds artifact sources from resource directories or single files."""

    @staticmethod
    def resolve(resource_path: str, anchor: str | Traversable) -> Traversable:
        """Locate *resource_path* under *anchor*, raising if it is absent."""
        try:
            base = resources.files(anchor) if isinstance(anchor, str) else anchor
        except ModuleNotFoundError as e:
            raise ArtifactSourceCreationError(
                f"Resource anchor package {anchor!r} not found"
            ) from e

        node = base
        for part in (p for p in resource_path.replace("\\", "/").split("/") if p):
            if part in (".", ".."):
                raise ArtifactSourceCreationError(
                    f"Relative segment not allowed in resource path {resource_path!r}"
                )
            node = node.joinpath(part)
        if not (node.is_dir() or node.is_file()):
            raise ArtifactSourceCreationError(
                f"Resource {resource_path!r} not found under {anchor!s}"
            )
        return node

    @classmethod
    def to_artifact_source(
        cls,
        resource_path: str,
        anchor: str | Traversable,
        *filters: ArtifactFilter,
    ) -> ArtifactSource:
        node = cls.resolve(resource_path, anchor)
        rid = ResourceIdentifier(anchor=str(anchor), resource_path=resource_path)
        if node.is_file():
            files = [FileArtifact.lazy(node.name, node.read_bytes)]
        else:
            files = _walk(node, "")
        source = apply(ArtifactSource(rid, files), *filters)
        logger.debug("Read %d files from resource %s", len(source), resource_path)
        return source

    @classmethod
    def resource_to_file(cls, resource_path: str, anchor: str | Traversable) -> Path:
        """Filesystem path of a resource; only valid for on-disk anchors."""
        return Path(str(cls.resolve(resource_path, anchor)))
