"""Write a whole artifact source to a remote branch as one commit."""

from __future__ import annotations

import logging

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.git.services import GitHubServices
from artifactsource.models.artifacts import FileArtifact
from artifactsource.models.updates import GitHubSourceUpdateInfo

logger = logging.getLogger(__name__)


class GitHubArtifactSourceWriter:
    """Writes every file of a source to ``update_info.locator``'s branch.

    Files already on the branch but absent from the source are kept.
    """

    def __init__(self, services: GitHubServices) -> None:
        self._services = services

    def write(
        self, source: ArtifactSource, update_info: GitHubSourceUpdateInfo
    ) -> list[FileArtifact]:
        written = self._services.commit_files(update_info, source.all_files)
        logger.info(
            "Wrote %d files from %s to %s", len(written), source.id.name, update_info.locator.name
        )
        return written
