"""Tests for reading packaged resources."""

from __future__ import annotations

from pathlib import Path

import pytest

from artifactsource.core.binary import is_binary_content
from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.file.resources import ResourceArtifactSource
from artifactsource.models.artifacts import FileArtifact


class TestResourceArtifactSource:
    def test_missing_resource(self, resources_dir: Path):
        with pytest.raises(ArtifactSourceCreationError):
            ResourceArtifactSource.to_artifact_source("this is complete nonsense", resources_dir)

    @pytest.mark.parametrize("path", ["../..", "java-source/../java-source", "./java-source"])
    def test_relative_segments_rejected(self, resources_dir: Path, path: str):
        with pytest.raises(ArtifactSourceCreationError):
            ResourceArtifactSource.to_artifact_source(path, resources_dir)

    def test_missing_anchor_package(self):
        with pytest.raises(ArtifactSourceCreationError):
            ResourceArtifactSource.to_artifact_source("x", "no_such_package_anywhere")

    def test_single_file_resource(self, resources_dir: Path):
        source = ResourceArtifactSource.to_artifact_source(
            "java-source/HelloWorldService.java", resources_dir
        )
        files = [a for a in source.artifacts if isinstance(a, FileArtifact)]
        assert len(files) == 1
        f = files[0]
        assert f.path == "HelloWorldService.java"
        assert f.content_length > 0
        assert len(f.content) == f.content_length
        assert is_binary_content(f.content) is False

    def test_directory_resource(self, resources_dir: Path):
        source = ResourceArtifactSource.to_artifact_source("spring-boot", resources_dir)
        assert any(".vm" in f.name for f in source.all_files)
        assert source.find_directory("atomistTemplates") is not None
        assert source.find_directory("xsdfsdfsdfsdf") is None

    def test_package_anchor(self):
        source = ResourceArtifactSource.to_artifact_source("models", "artifactsource")
        assert source.find_file("artifacts.py") is not None

    def test_can_cache(self, resources_dir: Path):
        source = ResourceArtifactSource.to_artifact_source("spring-boot", resources_dir)
        assert not any(f.is_cached for f in source.all_files)
        cached = source.cached()
        assert all(f.is_cached for f in cached.all_files)
        assert cached == source

    def test_filter_files(self, resources_dir: Path):
        s = ResourceArtifactSource.to_artifact_source("spring-boot", resources_dir) / "atomistTemplates"
        assert any(".vm" in f.name for f in s.all_files)
        filtered = s.filter(lambda d: True, lambda f: ".vm" not in f.name)
        assert filtered.empty

    def test_filter_directories(self, resources_dir: Path):
        s = ResourceArtifactSource.to_artifact_source("spring-boot", resources_dir)
        assert any("Application" in f.name for f in s.all_files)
        filtered = s.filter(lambda d: d.name != "java", lambda f: True)
        assert not any(f.name.endswith(".java") for f in filtered.all_files)
        assert filtered.find_file("web-template/pom.xml") is not None

    def test_resource_to_file(self, resources_dir: Path):
        path = ResourceArtifactSource.resource_to_file("java-source/HelloWorldService.java", resources_dir)
        assert path.is_file()
