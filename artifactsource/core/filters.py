"""Ignore filters applied while reading or transforming artifact sources.

A filter decides which directories and files survive. Filters plug into
``ArtifactSource.filter`` through ``apply``; a file survives only if every
filter accepts it and every one of its ancestor directories.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.models.artifacts import DirectoryArtifact, FileArtifact

logger = logging.getLogger(__name__)


@runtime_checkable
class ArtifactFilter(Protocol):
    """Protocol for directory/file inclusion filters."""

    def include_directory(self, directory: DirectoryArtifact) -> bool:
        ...

    def include_file(self, file: FileArtifact) -> bool:
        ...


def apply(source: ArtifactSource, *filters: ArtifactFilter) -> ArtifactSource:
    """Return *source* restricted by every filter in *filters*."""
    if not filters:
        return source
    return source.filter(
        lambda d: all(f.include_directory(d) for f in filters),
        lambda a: all(f.include_file(a) for f in filters),
    )


def _matches(path: str, name: str, patterns: Iterable[str]) -> bool:
    return any(
        fnmatch.fnmatchcase(name, pattern) or fnmatch.fnmatchcase(path, pattern)
        for pattern in patterns
    )


class GitDirFilter:
    """Excludes the ``.git`` directory of a working copy."""

    def include_directory(self, directory: DirectoryArtifact) -> bool:
        return directory.name != ".git"

    def include_file(self, file: FileArtifact) -> bool:
        return True


class NamePatternFilter:
    """Excludes directories and files whose name or path matches a pattern.

    Parameters
    ----------
    directory_patterns:
        fnmatch patterns for directories to exclude (e.g. ``"node_modules"``).
    file_patterns:
        fnmatch patterns for files to exclude (e.g. ``"*.pyc"``).
    """

    def __init__(
        self,
        directory_patterns: Iterable[str] = (),
        file_patterns: Iterable[str] = (),
    ) -> None:
        self._dir_patterns = tuple(directory_patterns)
        self._file_patterns = tuple(file_patterns)

    def include_directory(self, directory: DirectoryArtifact) -> bool:
        return not _matches(directory.path, directory.name, self._dir_patterns)

    def include_file(self, file: FileArtifact) -> bool:
        return not _matches(file.path, file.name, self._file_patterns)


def parse_gitignore(content: str) -> list[str]:
    """Parse .gitignore content into patterns, skipping blanks and comments."""
    patterns = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def _gitignore_regex(pattern: str) -> re.Pattern[str]:
    """Compile a gitignore glob; ``*`` and ``?`` never cross ``/``."""
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        if pattern.startswith("**/", i) and (i == 0 or pattern[i - 1] == "/"):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i) and i + 2 == n and (i == 0 or pattern[i - 1] == "/"):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        elif pattern[i] == "[":
            end = pattern.find("]", i + 2 if pattern.startswith("[!", i) else i + 1)
            if end == -1:
                out.append(re.escape("["))
                i += 1
                continue
            body = pattern[i + 1:end]
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out))


class GitignoreFilter:
    """Excludes entries matched by the patterns of a ``.gitignore`` file.

    Negated patterns (``!pattern``) are not supported and are skipped.
    A pattern with a trailing slash matches directories only. A pattern
    containing a slash is matched against the root-relative path, any
    other pattern against the entry name at any depth. Wildcards stay
    within one path segment; ``**/`` matches any number of leading
    directories and a trailing ``/**`` everything below.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._rules: list[tuple[str, re.Pattern[str], bool, bool]] = []
        for raw in patterns:
            if raw.startswith("!"):
                logger.debug("Skipping unsupported negated gitignore pattern %r", raw)
                continue
            dir_only = raw.endswith("/")
            pattern = raw.strip("/")
            if pattern:
                self._rules.append(
                    (pattern, _gitignore_regex(pattern), dir_only, "/" in raw.rstrip("/"))
                )

    @classmethod
    def from_root(cls, root: Path) -> GitignoreFilter:
        """Build a filter from ``root/.gitignore``; no file means no patterns."""
        gitignore = Path(root) / ".gitignore"
        if not gitignore.is_file():
            return cls(())
        return cls(parse_gitignore(gitignore.read_text(encoding="utf-8", errors="replace")))

    @property
    def patterns(self) -> list[str]:
        return [p + "/" if dir_only else p for p, _, dir_only, _ in self._rules]

    def _ignored(self, path: str, name: str, is_dir: bool) -> bool:
        for _, regex, dir_only, path_only in self._rules:
            if dir_only and not is_dir:
                continue
            if regex.fullmatch(path if path_only else name):
                return True
        return False

    def include_directory(self, directory: DirectoryArtifact) -> bool:
        return not self._ignored(directory.path, directory.name, True)

    def include_file(self, file: FileArtifact) -> bool:
        return not self._ignored(file.path, file.name, False)


class AllOf:
    """Accepts an entry only if every wrapped filter accepts it."""

    def __init__(self, *filters: ArtifactFilter) -> None:
        self._filters = filters

    def include_directory(self, directory: DirectoryArtifact) -> bool:
        return all(f.include_directory(directory) for f in self._filters)

    def include_file(self, file: FileArtifact) -> bool:
        return all(f.include_file(file) for f in self._filters)
