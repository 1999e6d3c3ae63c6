"""``GitHost`` backed by the GitHub REST API.

Uses one ``requests.Session`` per client. The session is created with the
client and released by ``close()`` (or by leaving a ``with`` block).

Multi-file commits use the git data API: blobs are uploaded first, then a
tree is built on the parent's tree, a commit is created and finally the
branch ref is moved without force. Only the ref update is visible to other
readers, so a rejected step leaves the branch untouched.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import requests

from artifactsource.config import config
from artifactsource.core.errors import CommitFailedError, RemoteOperationError
from artifactsource.models.artifacts import DEFAULT_MODE, FileArtifact
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

_NOT_FOUND = (404,)
# 409: empty repository, 422: unknown sha for git data endpoints
_ABSENT_REF = (404, 409, 422)


def _message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text or resp.reason or ""
    if isinstance(payload, dict):
        return str(payload.get("message", "")) or resp.reason or ""
    return resp.reason or ""


def _to_pull_request(data: dict[str, Any]) -> PullRequest:
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        state=data.get("state", "open"),
        head=PullRequestBranch(ref=data["head"]["ref"], sha=data["head"]["sha"]),
        base=PullRequestBranch(ref=data["base"]["ref"], sha=data["base"]["sha"]),
        html_url=data.get("html_url") or "",
        merged=bool(data.get("merged") or data.get("merged_at")),
    )


def _to_commit_info(data: dict[str, Any]) -> CommitInfo:
    commit = data.get("commit", {})
    author = commit.get("author") or {}
    fields: dict[str, Any] = {
        "sha": data["sha"],
        "message": commit.get("message", ""),
        "parents": tuple(p["sha"] for p in data.get("parents", [])),
        "author": author.get("name"),
    }
    if author.get("date"):
        fields["timestamp"] = datetime.fromisoformat(author["date"].replace("Z", "+00:00"))
    return CommitInfo(**fields)


class GitHubClient:
    """GitHub implementation of ``GitHost``.

    Parameters
    ----------
    token:
        OAuth or personal access token.  Defaults to ``config.github_token``.
    api_url:
        REST API root.  Defaults to ``config.github_api_url``.
    session:
        A pre-built session (or compatible object); one is created if omitted.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_url = (api_url or config.github_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else config.http_timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/vnd.github+json"})
        token = token if token is not None else config.github_token
        if token:
            self._session.headers["Authorization"] = f"token {token}"

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = path if path.startswith("http") else f"{self._api_url}{path}"
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteOperationError(f"{method} {url} failed: {e}") from e

    def _call(
        self,
        method: str,
        path: str,
        *,
        absent: Sequence[int] = (),
        **kwargs: Any,
    ) -> Any:
        """Send a request and return its JSON body.

        Returns ``None`` for status codes listed in *absent*; raises
        ``RemoteOperationError`` for any other failure.
        """
        resp = self._send(method, path, **kwargs)
        if resp.status_code in absent:
            return None
        if not resp.ok:
            raise RemoteOperationError(
                f"{method} {path} failed ({resp.status_code}): {_message(resp)}",
                status_code=resp.status_code,
            )
        return resp.json() if resp.content else {}

    def _commit_step(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = self._send(method, path, **kwargs)
        except RemoteOperationError as e:
            raise CommitFailedError(str(e)) from e
        if not resp.ok:
            raise CommitFailedError(_message(resp) or f"{method} {path} failed ({resp.status_code})")
        return resp.json()

    # ------------------------------------------------------------------
    # Organizations and repositories
    # ------------------------------------------------------------------

    def get_organization(self, name: str) -> Organization | None:
        data = self._call("GET", f"/orgs/{name}", absent=_NOT_FOUND)
        if data is None:
            return None
        return Organization(login=data["login"], name=data.get("name"))

    def get_repository(self, repo: str, owner: str) -> Repository | None:
        data = self._call("GET", f"/repos/{owner}/{repo}", absent=_NOT_FOUND)
        if data is None:
            return None
        return self._to_repository(data)

    @staticmethod
    def _to_repository(data: dict[str, Any]) -> Repository:
        return Repository(
            name=data["name"],
            owner=data["owner"]["login"],
            default_branch=data.get("default_branch") or config.default_branch,
            private=bool(data.get("private")),
            html_url=data.get("html_url") or "",
        )

    def create_repository(
        self, repo: str, owner: str, *, auto_init: bool = False, private: bool = False
    ) -> Repository:
        path = "/user/repos" if self.get_organization(owner) is None else f"/orgs/{owner}/repos"
        data = self._call(
            "POST", path, json={"name": repo, "auto_init": auto_init, "private": private}
        )
        logger.info("Created repository %s/%s", owner, repo)
        return self._to_repository(data)

    # ------------------------------------------------------------------
    # Branches, trees and blobs
    # ------------------------------------------------------------------

    def branch_head(self, repo: str, owner: str, branch: str) -> str | None:
        data = self._call(
            "GET", f"/repos/{owner}/{repo}/git/ref/heads/{branch}", absent=_ABSENT_REF
        )
        if data is None or not isinstance(data, dict):
            return None
        return data["object"]["sha"]

    def create_branch(self, repo: str, owner: str, branch: str, from_branch: str) -> str:
        sha = self.branch_head(repo, owner, from_branch)
        if sha is None:
            raise RemoteOperationError(
                f"Branch {from_branch} not found in {owner}/{repo}", status_code=404
            )
        self._call(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        logger.debug("Created branch %s at %s in %s/%s", branch, sha[:7], owner, repo)
        return sha

    def read_tree(self, repo: str, owner: str, ref: str) -> RemoteTree | None:
        sha = self.branch_head(repo, owner, ref) or ref
        commit = self._call(
            "GET", f"/repos/{owner}/{repo}/git/commits/{sha}", absent=_ABSENT_REF
        )
        if commit is None:
            return None
        tree = self._call(
            "GET",
            f"/repos/{owner}/{repo}/git/trees/{commit['tree']['sha']}",
            params={"recursive": "1"},
            absent=_ABSENT_REF,
        )
        if tree is None:
            return None
        if tree.get("truncated"):
            logger.warning("Tree of %s/%s@%s was truncated by GitHub", owner, repo, ref)
        entries = tuple(
            TreeEntry(path=e["path"], sha=e["sha"], mode=int(e.get("mode", "100644"), 8))
            for e in tree.get("tree", [])
            if e.get("type") == "blob"
        )
        return RemoteTree(commit_sha=sha, entries=entries)

    def read_blob(self, repo: str, owner: str, sha: str) -> bytes:
        data = self._call("GET", f"/repos/{owner}/{repo}/git/blobs/{sha}")
        if data.get("encoding") == "base64":
            return base64.b64decode(data.get("content", ""))
        return str(data.get("content", "")).encode("utf-8")

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------

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
        prefix = f"/repos/{owner}/{repo}/git"

        blob_ids: dict[str, str] = {}
        for f in writes:
            blob = self._commit_step(
                "POST",
                f"{prefix}/blobs",
                json={"content": base64.b64encode(f.content).decode("ascii"), "encoding": "base64"},
            )
            blob_ids[f.path] = blob["sha"]

        tree_items: list[dict[str, Any]] = [
            {"path": f.path, "mode": f"{f.mode:06o}", "type": "blob", "sha": blob_ids[f.path]}
            for f in writes
        ]
        tree_items += [
            {"path": p, "mode": f"{DEFAULT_MODE:06o}", "type": "blob", "sha": None}
            for p in deletes
        ]
        tree_body: dict[str, Any] = {"tree": tree_items}
        if parent_sha:
            parent = self._commit_step("GET", f"{prefix}/commits/{parent_sha}")
            tree_body["base_tree"] = parent["tree"]["sha"]
        tree = self._commit_step("POST", f"{prefix}/trees", json=tree_body)

        commit_body: dict[str, Any] = {
            "message": message,
            "tree": tree["sha"],
            "parents": [parent_sha] if parent_sha else [],
        }
        if author:
            commit_body["author"] = {"name": author.name, "email": author.email}
        commit = self._commit_step("POST", f"{prefix}/commits", json=commit_body)

        if parent_sha:
            self._commit_step(
                "PATCH",
                f"{prefix}/refs/heads/{branch}",
                json={"sha": commit["sha"], "force": False},
            )
        else:
            self._commit_step(
                "POST",
                f"{prefix}/refs",
                json={"ref": f"refs/heads/{branch}", "sha": commit["sha"]},
            )
        logger.info(
            "Committed %d writes and %d deletes to %s/%s@%s (%s)",
            len(writes), len(deletes), owner, repo, branch, commit["sha"][:7],
        )
        return CommitResult(sha=commit["sha"], blob_ids=blob_ids)

    def list_commits(self, repo: str, owner: str, sha: str) -> list[CommitInfo]:
        commits: list[CommitInfo] = []
        url: str | None = f"/repos/{owner}/{repo}/commits"
        params: dict[str, Any] | None = {"sha": sha, "per_page": 100}
        while url:
            resp = self._send("GET", url, params=params)
            if resp.status_code in _ABSENT_REF:
                return commits
            if not resp.ok:
                raise RemoteOperationError(
                    f"Listing commits of {owner}/{repo} failed: {_message(resp)}",
                    status_code=resp.status_code,
                )
            commits.extend(_to_commit_info(c) for c in resp.json())
            url = resp.links.get("next", {}).get("url")
            params = None
        return commits

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    def create_pull_request(
        self, repo: str, owner: str, request: PullRequestRequest
    ) -> PullRequest:
        data = self._call("POST", f"/repos/{owner}/{repo}/pulls", json=request.model_dump())
        logger.info("Opened pull request #%d in %s/%s", data["number"], owner, repo)
        return _to_pull_request(data)

    def get_pull_request(self, repo: str, owner: str, number: int) -> PullRequest | None:
        data = self._call("GET", f"/repos/{owner}/{repo}/pulls/{number}", absent=_NOT_FOUND)
        return _to_pull_request(data) if data is not None else None

    def list_pull_requests(
        self, repo: str, owner: str, state: str = "open"
    ) -> list[PullRequest]:
        data = self._call(
            "GET", f"/repos/{owner}/{repo}/pulls", params={"state": state}, absent=_NOT_FOUND
        )
        return [_to_pull_request(d) for d in data or []]

    def merge_pull_request(
        self, repo: str, owner: str, number: int, title: str, message: str
    ) -> PullRequestMerge | None:
        resp = self._send(
            "PUT",
            f"/repos/{owner}/{repo}/pulls/{number}/merge",
            json={"commit_title": title, "commit_message": message},
        )
        if resp.status_code == 404:
            return None
        if resp.status_code in (405, 409):
            return PullRequestMerge(sha="", merged=False, message=_message(resp))
        if not resp.ok:
            raise RemoteOperationError(
                f"Merging pull request #{number} failed: {_message(resp)}",
                status_code=resp.status_code,
            )
        data = resp.json()
        return PullRequestMerge(
            sha=data.get("sha", ""), merged=bool(data.get("merged")), message=data.get("message", "")
        )

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
        data = self._call(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{number}/comments",
            json={"body": body, "commit_id": commit_id, "path": path, "position": position},
        )
        return ReviewComment(
            id=data["id"],
            body=data["body"],
            commit_id=data.get("commit_id", commit_id),
            path=data.get("path", path),
            position=data.get("position") or position,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
