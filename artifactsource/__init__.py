"""artifactsource: immutable file trees read from and written to many stores.

  - ``ArtifactSource``: persistent path-addressed tree with union, filter,
    delete, sub-tree and caching transforms
  - ``delta``: additions, removals and updates between two sources
  - Readers for directories, zip archives and packaged resources
  - Shallow git clones and atomic multi-file commits to a remote host
"""

__version__ = "0.1.0"
__description__ = "Immutable artifact sources with structural diff and remote commits"

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.differ import delta
from artifactsource.models.artifacts import DirectoryArtifact, FileArtifact
from artifactsource.models.delta import Delta

__all__ = [
    "ArtifactSource",
    "Delta",
    "DirectoryArtifact",
    "FileArtifact",
    "delta",
    "__version__",
]
