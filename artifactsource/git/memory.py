"""A process-local git host.

Repositories, branches, commits and pull requests live in memory. Blob ids
are git object ids, so a file written here gets the same ``unique_id`` it
would get on GitHub. All operations hold a single lock; a multi-file commit
is applied by swapping the branch head once every object has been built.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from artifactsource.core.errors import CommitFailedError, RemoteOperationError
from artifactsource.core.hasher import content_sha, git_blob_sha
from artifactsource.models.artifacts import FileArtifact
from artifactsource.models.github import (
    CommitInfo,
    CommitResult,
    Organization,
    PullRequest,
    PullRequestBranch,
    PullRequestMerge,
    PullRequestRequest,
    RemoteTree,
    Repository,
    ReviewComment,
    TreeEntry,
)
from artifactsource.models.updates import CommitAuthor

logger = logging.getLogger(__name__)

README = "README.md"


@dataclass
class _Commit:
    info: CommitInfo
    tree: dict[str, TreeEntry]


@dataclass
class _Pull:
    request: PullRequestRequest
    number: int
    base_sha_at_open: str
    state: str = "open"
    merged: bool = False


@dataclass
class _Repo:
    meta: Repository
    branches: dict[str, str] = field(default_factory=dict)
    commits: dict[str, _Commit] = field(default_factory=dict)
    blobs: dict[str, bytes] = field(default_factory=dict)
    pulls: dict[int, _Pull] = field(default_factory=dict)
    comments: list[ReviewComment] = field(default_factory=list)


class InMemoryGitHost:
    """Thread-safe in-memory implementation of ``GitHost``.

    Parameters
    ----------
    base_url:
        Prefix for the ``html_url`` of repositories and pull requests.
    """

    def __init__(self, base_url: str = "https://github.local") -> None:
        self._base_url = base_url.rstrip("/")
        self._lock = threading.RLock()
        self._orgs: dict[str, Organization] = {}
        self._repos: dict[tuple[str, str], _Repo] = {}
        self._sequence = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Organizations and repositories
    # ------------------------------------------------------------------

    def create_organization(self, login: str, name: str | None = None) -> Organization:
        with self._lock:
            org = Organization(login=login, name=name)
            self._orgs[login] = org
            return org

    def get_organization(self, name: str) -> Organization | None:
        with self._lock:
            return self._orgs.get(name)

    def get_repository(self, repo: str, owner: str) -> Repository | None:
        with self._lock:
            state = self._repos.get((owner, repo))
            return state.meta if state else None

    def create_repository(
        self, repo: str, owner: str, *, auto_init: bool = False, private: bool = False
    ) -> Repository:
        with self._lock:
            if (owner, repo) in self._repos:
                raise RemoteOperationError(
                    f"Repository {owner}/{repo} already exists", status_code=422
                )
            meta = Repository(
                name=repo,
                owner=owner,
                private=private,
                html_url=f"{self._base_url}/{owner}/{repo}",
            )
            self._repos[(owner, repo)] = _Repo(meta=meta)
            if auto_init:
                readme = FileArtifact.from_string(README, f"# {repo}\n")
                self.commit_files(
                    repo, owner, meta.default_branch, "Initial commit", [readme], [],
                    parent_sha=None,
                )
            logger.info("Created repository %s/%s", owner, repo)
            return meta

    def delete_repository(self, repo: str, owner: str) -> None:
        with self._lock:
            self._repos.pop((owner, repo), None)

    def _repo(self, repo: str, owner: str) -> _Repo:
        state = self._repos.get((owner, repo))
        if state is None:
            raise RemoteOperationError(f"Repository {owner}/{repo} not found", status_code=404)
        return state

    # ------------------------------------------------------------------
    # Branches, trees and blobs
    # ------------------------------------------------------------------

    def branch_head(self, repo: str, owner: str, branch: str) -> str | None:
        with self._lock:
            state = self._repos.get((owner, repo))
            return state.branches.get(branch) if state else None

    def create_branch(self, repo: str, owner: str, branch: str, from_branch: str) -> str:
        with self._lock:
            state = self._repo(repo, owner)
            sha = state.branches.get(from_branch)
            if sha is None:
                raise RemoteOperationError(
                    f"Branch {from_branch} not found in {owner}/{repo}", status_code=404
                )
            if branch in state.branches:
                raise RemoteOperationError(
                    f"Reference refs/heads/{branch} already exists", status_code=422
                )
            state.branches[branch] = sha
            logger.debug("Created branch %s at %s in %s/%s", branch, sha[:7], owner, repo)
            return sha

    def read_tree(self, repo: str, owner: str, ref: str) -> RemoteTree | None:
        with self._lock:
            state = self._repos.get((owner, repo))
            if state is None:
                return None
            sha = state.branches.get(ref, ref)
            commit = state.commits.get(sha)
            if commit is None:
                return None
            return RemoteTree(commit_sha=sha, entries=tuple(commit.tree.values()))

    def read_blob(self, repo: str, owner: str, sha: str) -> bytes:
        with self._lock:
            state = self._repo(repo, owner)
            try:
                return state.blobs[sha]
            except KeyError:
                raise RemoteOperationError(f"Blob {sha} not found", status_code=404) from None

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

    def _new_commit(
        self,
        state: _Repo,
        tree: dict[str, TreeEntry],
        parents: tuple[str, ...],
        message: str,
        author: CommitAuthor | None,
    ) -> str:
        self._sequence += 1
        sha = content_sha({
            "tree": sorted((e.path, e.sha, e.mode) for e in tree.values()),
            "parents": list(parents),
            "message": message,
            "sequence": self._sequence,
        })
        info = CommitInfo(
            sha=sha,
            message=message,
            parents=parents,
            author=author.name if author else None,
        )
        state.commits[sha] = _Commit(info=info, tree=tree)
        return sha

    def commit_files(
        self,
        repo: str,
        owner: str,
        branch: str,
        message: str,
        writes: Sequence[FileArtifact],
        deletes: Sequence[str],
        *,
        parent_sha: str | None,
        author: CommitAuthor | None = None,
    ) -> CommitResult:
        with self._lock:
            state = self._repos.get((owner, repo))
            if state is None:
                raise CommitFailedError(f"Repository {owner}/{repo} not found")
            head = state.branches.get(branch)
            if parent_sha is None:
                if head is not None:
                    raise CommitFailedError(f"Reference refs/heads/{branch} already exists")
                tree: dict[str, TreeEntry] = {}
            else:
                if head is None:
                    raise CommitFailedError(f"Branch {branch} not found")
                if head != parent_sha:
                    raise CommitFailedError(
                        f"Update is not a fast forward: {branch} is at {head[:7]}, "
                        f"expected {parent_sha[:7]}"
                    )
                tree = dict(state.commits[head].tree)

            blobs: dict[str, bytes] = {}
            blob_ids: dict[str, str] = {}
            for f in writes:
                content = f.content
                sha = git_blob_sha(content)
                blobs[sha] = content
                blob_ids[f.path] = sha
                tree[f.path] = TreeEntry(path=f.path, sha=sha, mode=f.mode)
            for path in deletes:
                tree.pop(path, None)

            state.blobs.update(blobs)
            parents = (parent_sha,) if parent_sha else ()
            commit_sha = self._new_commit(state, tree, parents, message, author)
            state.branches[branch] = commit_sha
            logger.info(
                "Committed %d writes and %d deletes to %s/%s@%s (%s)",
                len(writes), len(deletes), owner, repo, branch, commit_sha[:7],
            )
            return CommitResult(sha=commit_sha, blob_ids=blob_ids)

    def list_commits(self, repo: str, owner: str, sha: str) -> list[CommitInfo]:
        with self._lock:
            state = self._repos.get((owner, repo))
            if state is None or sha not in state.commits:
                return []
            seen: set[str] = set()
            result: list[CommitInfo] = []
            pending = [sha]
            while pending:
                current = pending.pop(0)
                if current in seen:
                    continue
                seen.add(current)
                info = state.commits[current].info
                result.append(info)
                pending.extend(info.parents)
            return result

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    def _to_pull_request(self, state: _Repo, pull: _Pull) -> PullRequest:
        req = pull.request
        meta = state.meta
        return PullRequest(
            number=pull.number,
            title=req.title,
            body=req.body,
            state=pull.state,
            head=PullRequestBranch(ref=req.head, sha=state.branches.get(req.head, "")),
            base=PullRequestBranch(ref=req.base, sha=state.branches.get(req.base, "")),
            html_url=f"{meta.html_url}/pull/{pull.number}",
            merged=pull.merged,
        )

    def create_pull_request(
        self, repo: str, owner: str, request: PullRequestRequest
    ) -> PullRequest:
        with self._lock:
            state = self._repo(repo, owner)
            base_sha = state.branches.get(request.base)
            if base_sha is None or request.head not in state.branches:
                raise RemoteOperationError(
                    f"Cannot open pull request {request.head} -> {request.base}: "
                    "branch not found",
                    status_code=422,
                )
            number = len(state.pulls) + 1
            pull = _Pull(request=request, number=number, base_sha_at_open=base_sha)
            state.pulls[number] = pull
            logger.info("Opened pull request #%d in %s/%s", number, owner, repo)
            return self._to_pull_request(state, pull)

    def get_pull_request(self, repo: str, owner: str, number: int) -> PullRequest | None:
        with self._lock:
            state = self._repos.get((owner, repo))
            if state is None or number not in state.pulls:
                return None
            return self._to_pull_request(state, state.pulls[number])

    def list_pull_requests(
        self, repo: str, owner: str, state: str = "open"
    ) -> list[PullRequest]:
        with self._lock:
            repo_state = self._repos.get((owner, repo))
            if repo_state is None:
                return []
            return [
                self._to_pull_request(repo_state, p)
                for p in repo_state.pulls.values()
                if state == "all" or p.state == state
            ]

    def merge_pull_request(
        self, repo: str, owner: str, number: int, title: str, message: str
    ) -> PullRequestMerge | None:
        """Merge by replaying the head's changes since the PR opened onto the base."""
        with self._lock:
            state = self._repos.get((owner, repo))
            if state is None or number not in state.pulls:
                return None
            pull = state.pulls[number]
            if pull.state != "open":
                return PullRequestMerge(sha="", merged=False, message="Pull Request is not mergeable")

            req = pull.request
            base_head = state.branches[req.base]
            head_sha = state.branches[req.head]
            origin = state.commits[pull.base_sha_at_open].tree
            head_tree = state.commits[head_sha].tree

            tree = dict(state.commits[base_head].tree)
            for path, entry in head_tree.items():
                if origin.get(path) != entry:
                    tree[path] = entry
            for path in origin:
                if path not in head_tree:
                    tree.pop(path, None)

            merge_sha = self._new_commit(
                state, tree, (base_head, head_sha), f"{title}\n\n{message}", None
            )
            state.branches[req.base] = merge_sha
            pull.state = "closed"
            pull.merged = True
            logger.info("Merged pull request #%d in %s/%s", number, owner, repo)
            return PullRequestMerge(sha=merge_sha, merged=True, message="Pull Request successfully merged")

    def create_review_comment(
        self,
        repo: str,
        owner: str,
        number: int,
        body: str,
        commit_id: str,
        path: str,
        position: int,
    ) -> ReviewComment:
        with self._lock:
            state = self._repo(repo, owner)
            if number not in state.pulls:
                raise RemoteOperationError(f"Pull request #{number} not found", status_code=404)
            comment = ReviewComment(
                id=len(state.comments) + 1,
                body=body,
                commit_id=commit_id,
                path=path,
                position=position,
            )
            state.comments.append(comment)
            return comment

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> InMemoryGitHost:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
