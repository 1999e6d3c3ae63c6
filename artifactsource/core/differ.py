"""Delta computation between two artifact sources.

Both sides are indexed by path once. Additions and updates follow the
iteration order of the new source, removals that of the old source.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifactsource.models.delta import Delta, FileUpdate

if TYPE_CHECKING:
    from artifactsource.core.artifact_source import ArtifactSource

logger = logging.getLogger(__name__)


def delta(old: ArtifactSource, new: ArtifactSource) -> Delta:
    """Compute the structural delta that turns *old* into *new*.

    A file whose bytes are unchanged but whose mode differs is an update.
    """
    old_index = {f.path: f for f in old.all_files}
    new_index = {f.path: f for f in new.all_files}

    additions = []
    updates = []
    for path, new_file in new_index.items():
        old_file = old_index.get(path)
        if old_file is None:
            additions.append(new_file)
        elif not old_file.same_content(new_file):
            updates.append(FileUpdate(old=old_file, new=new_file))

    removals = [f for p, f in old_index.items() if p not in new_index]

    logger.debug(
        "delta %s -> %s: %d added, %d removed, %d updated",
        old.id.name,
        new.id.name,
        len(additions),
        len(removals),
        len(updates),
    )
    return Delta(
        additions=tuple(additions),
        removals=tuple(removals),
        updates=tuple(updates),
    )
