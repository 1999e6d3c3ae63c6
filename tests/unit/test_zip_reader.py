"""Tests for reading zip archives."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from artifactsource.core.errors import ArtifactSourceCreationError
from artifactsource.core.filters import GitDirFilter
from artifactsource.file.zip_reader import ZipFileArtifactSourceReader
from artifactsource.models.artifacts import EXECUTABLE_MODE
from artifactsource.models.identifiers import ZipIdentifier


class TestZipReader:
    def test_reads_bytes(self, make_zip):
        data = make_zip({"a.txt": b"a", "dir/b.txt": b"b"})
        source = ZipFileArtifactSourceReader.from_zip_source(data)
        assert sorted(source.paths) == ["a.txt", "dir/b.txt"]
        assert all(f.is_cached for f in source.all_files)
        assert isinstance(source.id, ZipIdentifier)

    def test_reads_stream_and_path(self, make_zip, tmp_path: Path):
        data = make_zip({"a.txt": b"a"})
        path = tmp_path / "archive.zip"
        path.write_bytes(data)
        from_stream = ZipFileArtifactSourceReader.from_zip_source(io.BytesIO(data))
        from_path = ZipFileArtifactSourceReader.from_zip_source(path)
        assert from_stream == from_path
        assert from_path.id.name == "archive.zip"

    def test_skips_directory_entries(self):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("dir/", b"")
            archive.writestr("dir/file.txt", b"x")
        source = ZipFileArtifactSourceReader.from_zip_source(buffer.getvalue())
        assert source.paths == ["dir/file.txt"]

    def test_skips_unsafe_names(self, make_zip):
        data = make_zip({"../evil.txt": b"x", "ok.txt": b"y"})
        source = ZipFileArtifactSourceReader.from_zip_source(data)
        assert source.paths == ["ok.txt"]

    def test_executable_mode_from_external_attr(self, make_zip):
        data = make_zip({"run.sh": b"#!/bin/sh\n", "a.txt": b"a"}, executables=("run.sh",))
        source = ZipFileArtifactSourceReader.from_zip_source(data)
        assert source.find_file("run.sh").mode == EXECUTABLE_MODE
        assert not source.find_file("a.txt").is_executable

    def test_applies_filters(self, make_zip):
        data = make_zip({".git/HEAD": b"ref", "a.txt": b"a"})
        source = ZipFileArtifactSourceReader.from_zip_source(data, GitDirFilter())
        assert source.paths == ["a.txt"]

    def test_jar_contents_are_readable(self, make_zip):
        jar = make_zip({"META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n"})
        source = ZipFileArtifactSourceReader.from_zip_source(jar, label="maven-wrapper.jar")
        assert source.find_file("META-INF/MANIFEST.MF") is not None

    def test_bad_archive(self):
        with pytest.raises(ArtifactSourceCreationError):
            ZipFileArtifactSourceReader.from_zip_source(b"not a zip")

    def test_corrupt_deflate_data(self):
        payload = b"The quick brown fox jumped over the lazy dog\n" * 50
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("fox.txt", payload)
        data = bytearray(buffer.getvalue())
        for i in range(40, 60):
            data[i] ^= 0xFF
        with pytest.raises(ArtifactSourceCreationError):
            ZipFileArtifactSourceReader.from_zip_source(bytes(data))

    def test_encrypted_entry(self, monkeypatch, make_zip):
        def refuse(self, name, pwd=None):
            raise RuntimeError("File 'a.txt' is encrypted, password required for extraction")

        monkeypatch.setattr(zipfile.ZipFile, "read", refuse)
        with pytest.raises(ArtifactSourceCreationError):
            ZipFileArtifactSourceReader.from_zip_source(make_zip({"a.txt": b"a"}))
