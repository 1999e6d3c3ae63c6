"""artifactsource data models — all Pydantic v2, all frozen (immutable)."""

from artifactsource.models.artifacts import (
    DEFAULT_MODE,
    EXECUTABLE_MODE,
    Artifact,
    DirectoryArtifact,
    FileArtifact,
)
from artifactsource.models.clone import CloneResult
from artifactsource.models.delta import Delta, FileAddition, FileDeletion, FileUpdate
from artifactsource.models.github import (
    CommitInfo,
    CommitResult,
    Organization,
    PullRequest,
    PullRequestMerge,
    PullRequestRequest,
    RemoteTree,
    Repository,
    ReviewComment,
    TreeEntry,
)
from artifactsource.models.identifiers import (
    MASTER_BRANCH,
    ArtifactSourceIdentifier,
    FileSystemIdentifier,
    GitHubIdentifier,
    RepoRef,
    ResourceIdentifier,
    SimpleIdentifier,
    ZipIdentifier,
)
from artifactsource.models.updates import CommitAuthor, GitHubSourceUpdateInfo, SourceUpdateInfo

__all__ = [
    # artifacts
    "DEFAULT_MODE",
    "EXECUTABLE_MODE",
    "Artifact",
    "DirectoryArtifact",
    "FileArtifact",
    # delta
    "Delta",
    "FileAddition",
    "FileDeletion",
    "FileUpdate",
    # identifiers
    "MASTER_BRANCH",
    "ArtifactSourceIdentifier",
    "FileSystemIdentifier",
    "GitHubIdentifier",
    "RepoRef",
    "ResourceIdentifier",
    "SimpleIdentifier",
    "ZipIdentifier",
    # updates
    "CommitAuthor",
    "GitHubSourceUpdateInfo",
    "SourceUpdateInfo",
    # clone
    "CloneResult",
    # remote
    "CommitInfo",
    "CommitResult",
    "Organization",
    "PullRequest",
    "PullRequestMerge",
    "PullRequestRequest",
    "RemoteTree",
    "Repository",
    "ReviewComment",
    "TreeEntry",
]
