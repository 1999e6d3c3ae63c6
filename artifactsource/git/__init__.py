"""Remote repositories: cloning, hosts, atomic commits and pull requests."""

from artifactsource.git.cloner import GitRepositoryCloner
from artifactsource.git.github_client import GitHubClient
from artifactsource.git.host import GitHost
from artifactsource.git.memory import InMemoryGitHost
from artifactsource.git.services import GitHubServices
from artifactsource.git.writer import GitHubArtifactSourceWriter

__all__ = [
    "GitHost",
    "GitHubArtifactSourceWriter",
    "GitHubClient",
    "GitHubServices",
    "GitRepositoryCloner",
    "InMemoryGitHost",
]
