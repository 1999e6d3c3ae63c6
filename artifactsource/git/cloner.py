"""Shallow clones of remote repositories via the ``git`` executable.

Each clone lands in its own directory. Temporary directories are removed at
interpreter exit as a best effort; callers should ``cleanup`` explicitly.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import subprocess
import tempfile
import time
from pathlib import Path
from urllib.parse import urlsplit

from artifactsource.config import config
from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.file.filesystem import FileSystemGitArtifactSource
from artifactsource.models.clone import CloneResult
from artifactsource.models.identifiers import FileSystemIdentifier

logger = logging.getLogger(__name__)

_pending_cleanup: set[Path] = set()


@atexit.register
def _cleanup_at_exit() -> None:
    for path in list(_pending_cleanup):
        shutil.rmtree(path, ignore_errors=True)
    _pending_cleanup.clear()


def _git_env() -> dict[str, str]:
    env = {"GIT_TERMINAL_PROMPT": "0"}
    for key in ("PATH", "HOME", "SYSTEMROOT"):
        if key in os.environ:
            env[key] = os.environ[key]
    return env


class GitRepositoryCloner:
    """Clones ``owner/repo`` from a git host into a local directory.

    Parameters
    ----------
    oauth_token:
        Token placed in the clone URL's authority; empty for anonymous clones.
    remote_url:
        Base URL of the host.  Defaults to ``config.github_url``.
    timeout:
        Seconds each git invocation may run.
    """

    def __init__(
        self,
        oauth_token: str = "",
        remote_url: str | None = None,
        *,
        timeout: float | None = None,
        default_branch: str | None = None,
    ) -> None:
        self._token = oauth_token or ""
        self._remote_url = remote_url
        self._timeout = timeout if timeout is not None else config.clone_timeout_seconds
        self._default_branch = default_branch or config.default_branch

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def base_url(self) -> str:
        """Host URL with the token (if any) injected into its authority."""
        raw = self._remote_url or config.github_url
        parts = urlsplit(raw)
        if parts.scheme not in ("http", "https", "file", "ssh", "git") or (
            parts.scheme != "file" and not parts.netloc
        ):
            raise ArtifactSourceCreationError(f"Failed to parse remote URL {raw!r}")
        if self._token.strip() and parts.scheme in ("http", "https"):
            return f"{parts.scheme}://{self._token}@{parts.netloc}{parts.path.rstrip('/')}"
        return raw.rstrip("/")

    def clone_command(
        self, repo: str, owner: str, branch: str | None, depth: int, path: Path
    ) -> list[str]:
        command = ["git", "clone"]
        if branch and branch != self._default_branch:
            command += ["-b", branch]
        command += ["--depth", str(depth), f"{self.base_url()}/{owner}/{repo}.git", str(path)]
        return command

    def _run(self, command: list[str], cwd: Path) -> int:
        result = subprocess.run(
            command,
            cwd=str(cwd),
            env=_git_env(),
            capture_output=True,
            text=True,
            timeout=self._timeout,
        )
        if result.returncode != 0:
            logger.debug("%s exited %d: %s", command[:2], result.returncode, result.stderr.strip())
        return result.returncode

    # ------------------------------------------------------------------
    # Clone
    # ------------------------------------------------------------------

    def try_clone(
        self,
        repo: str,
        owner: str,
        branch: str | None = None,
        sha: str | None = None,
        directory: Path | None = None,
        depth: int | None = None,
    ) -> CloneResult:
        """Clone into *directory* (or a new temporary directory).

        Never raises for git or setup failures; the returned ``CloneResult``
        carries either the directory or the diagnostic.
        """
        depth = depth if depth is not None else config.clone_depth
        try:
            repo_dir = self._create_repo_directory(repo, owner, directory)
            command = self.clone_command(repo, owner, branch, depth, repo_dir)
        except ArtifactSourceCreationError as e:
            return CloneResult(status="setup_failed", message=str(e))

        try:
            rc = self._run(command, cwd=repo_dir.parent)
        except (subprocess.SubprocessError, OSError) as e:
            return CloneResult(
                status="clone_failed", path=repo_dir, message=f"Failed to clone '{owner}/{repo}': {e}"
            )
        if rc != 0:
            return CloneResult(
                status="clone_failed",
                path=repo_dir,
                message=f"Failed to clone '{owner}/{repo}'. Return code {rc}",
                return_code=rc,
            )

        if sha:
            try:
                rc = self._run(["git", "reset", "--hard", sha], cwd=repo_dir)
            except (subprocess.SubprocessError, OSError) as e:
                return CloneResult(
                    status="clone_failed",
                    path=repo_dir,
                    message=f"Failed to reset '{owner}/{repo}' to {sha}: {e}",
                    sha=sha,
                )
            if rc != 0:
                return CloneResult(
                    status="commit_not_found",
                    path=repo_dir,
                    message=f"Failed to find commit with sha {sha}. Return code {rc}",
                    return_code=rc,
                    sha=sha,
                )

        logger.info("Cloned %s/%s into %s", owner, repo, repo_dir)
        return CloneResult(status="cloned", path=repo_dir, sha=sha)

    def clone_directory(
        self,
        repo: str,
        owner: str,
        branch: str | None = None,
        sha: str | None = None,
        directory: Path | None = None,
        depth: int | None = None,
    ) -> Path:
        """Clone and return the directory, raising on failure.

        Raises
        ------
        CloneFailedError
            ``git clone`` failed, timed out or could not be started.
        CommitNotFoundError
            The clone succeeded but *sha* could not be checked out, typically
            because it predates the shallow history.
        ArtifactSourceCreationError
            The remote URL is malformed or the target directory is unusable.
        """
        return self.try_clone(repo, owner, branch, sha, directory, depth).unwrap()

    def clone(
        self,
        repo: str,
        owner: str,
        branch: str | None = None,
        sha: str | None = None,
        directory: Path | None = None,
        depth: int | None = None,
    ) -> ArtifactSource:
        """Clone and read the working copy, without ``.git`` and ignored files."""
        repo_dir = self.clone_directory(repo, owner, branch, sha, directory, depth)
        fid = FileSystemIdentifier(root=repo_dir, label=f"{owner}/{repo}")
        return FileSystemGitArtifactSource.from_identifier(fid)

    @staticmethod
    def _create_repo_directory(repo: str, owner: str, directory: Path | None) -> Path:
        if directory is not None:
            directory = Path(directory)
            try:
                directory.mkdir(parents=True)
            except OSError as e:
                raise ArtifactSourceCreationError(
                    f"Failed to create clone directory {directory}: {e}"
                ) from e
            return directory
        tmp = Path(tempfile.mkdtemp(prefix=f"{owner}_{repo}_{int(time.time() * 1000)}_"))
        _pending_cleanup.add(tmp)
        # git clone needs a missing or empty target; clone into a child.
        return tmp / repo

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    @staticmethod
    def cleanup(target: Path | FileSystemIdentifier) -> None:
        """Delete a clone directory; a missing directory is not an error."""
        path = Path(target.root if isinstance(target, FileSystemIdentifier) else target)
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
        parent = path.parent
        if parent in _pending_cleanup:
            shutil.rmtree(parent, ignore_errors=True)
            _pending_cleanup.discard(parent)
        _pending_cleanup.discard(path)
        logger.debug("Cleaned up %s", path)
