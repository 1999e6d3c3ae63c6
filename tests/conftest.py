"""Shared test fixtures for artifactsource."""

from __future__ import annotations

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.git.memory import InMemoryGitHost
from artifactsource.git.services import GitHubServices
from artifactsource.models.artifacts import EXECUTABLE_MODE, FileArtifact
from artifactsource.models.github import Repository

RESOURCES = Path(__file__).parent / "resources"

TEST_ORG = "atomisthqa"
TEST_FILE_CONTENTS = "Some content"
TEST_FILE_CONTENTS_2 = "The quick brown fox jumped over the lazy dog"


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def resources_dir() -> Path:
    """Root of the on-disk test resources."""
    return RESOURCES


@pytest.fixture
def sample_source() -> ArtifactSource:
    """A small in-memory tree with nested directories and an executable."""
    return ArtifactSource.of(
        FileArtifact.from_string("README.md", "# Sample\n"),
        FileArtifact.from_string("src/main/App.java", "class App {}\n"),
        FileArtifact.from_string("src/main/util/Strings.java", "class Strings {}\n"),
        FileArtifact.from_string("src/test/AppTest.java", "class AppTest {}\n"),
        FileArtifact.from_string("bin/run.sh", "#!/bin/sh\necho run\n", mode=EXECUTABLE_MODE),
        label="sample",
    )


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    """Factory fixture: build zip bytes from a path -> content mapping."""

    def _factory(entries: dict[str, bytes], executables: tuple[str, ...] = ()) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, data in entries.items():
                info = zipfile.ZipInfo(name)
                mode = 0o755 if name in executables else 0o644
                info.external_attr = (0o100000 | mode) << 16
                archive.writestr(info, data)
        return buffer.getvalue()

    return _factory


@pytest.fixture
def host() -> InMemoryGitHost:
    """Provide a fresh in-memory git host with a test organization."""
    h = InMemoryGitHost()
    h.create_organization(TEST_ORG, name="Test Org")
    yield h
    h.close()


@pytest.fixture
def services(host: InMemoryGitHost) -> GitHubServices:
    return GitHubServices(host)


@pytest.fixture
def new_temporary_repo(host: InMemoryGitHost) -> Callable[..., Repository]:
    """Factory fixture: an empty repository (no branches, no commits)."""
    counter = iter(range(1, 10_000))

    def _factory(populated: bool = False) -> Repository:
        return host.create_repository(
            f"test-repo-{next(counter)}", TEST_ORG, auto_init=populated
        )

    return _factory


@pytest.fixture
def new_populated_temporary_repo(new_temporary_repo: Callable[..., Repository]) -> Callable[[], Repository]:
    """Factory fixture: a repository whose master branch holds one README."""

    def _factory() -> Repository:
        return new_temporary_repo(populated=True)

    return _factory
