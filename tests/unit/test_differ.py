"""Tests for the diff engine."""

from __future__ import annotations

import pytest

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.differ import delta
from artifactsource.models.artifacts import EXECUTABLE_MODE, FileArtifact


@pytest.fixture
def other_source() -> ArtifactSource:
    return ArtifactSource.of(
        FileArtifact.from_string("README.md", "# Changed\n"),
        FileArtifact.from_string("src/main/App.java", "class App {}\n"),
        FileArtifact.from_string("docs/guide.md", "guide"),
        FileArtifact.from_string("bin/run.sh", "#!/bin/sh\necho run\n"),
    )


class TestDelta:
    def test_self_delta_is_empty(self, sample_source: ArtifactSource):
        assert delta(sample_source, sample_source).is_empty

    def test_equal_sources_give_empty_delta(self, sample_source: ArtifactSource):
        copy = ArtifactSource.of(*[f.cached() for f in sample_source.all_files])
        assert delta(sample_source, copy).is_empty

    def test_additions_removals_updates(self, sample_source: ArtifactSource, other_source: ArtifactSource):
        d = delta(sample_source, other_source)
        assert d.added_paths == ["docs/guide.md"]
        assert sorted(d.removed_paths) == [
            "src/main/util/Strings.java",
            "src/test/AppTest.java",
        ]
        assert sorted(d.updated_paths) == ["README.md", "bin/run.sh"]
        assert not d.is_empty

    def test_mode_only_change_is_update(self, sample_source: ArtifactSource, other_source: ArtifactSource):
        d = delta(sample_source, other_source)
        run = next(u for u in d.updates if u.path == "bin/run.sh")
        assert run.mode_changed
        assert run.old.mode == EXECUTABLE_MODE
        assert run.old.content == run.new.content

    def test_swapping_sides_swaps_additions_and_removals(
        self, sample_source: ArtifactSource, other_source: ArtifactSource
    ):
        forward = delta(sample_source, other_source)
        backward = delta(other_source, sample_source)
        assert forward.added_paths == backward.removed_paths
        assert forward.removed_paths == backward.added_paths
        assert sorted(forward.updated_paths) == sorted(backward.updated_paths)

    def test_delta_empty_iff_equal(self, sample_source: ArtifactSource, other_source: ArtifactSource):
        assert (sample_source == other_source) == delta(sample_source, other_source).is_empty

    def test_deleted_readme_and_added_file(self, sample_source: ArtifactSource):
        modified = sample_source.delete("README.md") + [FileArtifact.from_string("some.txt", "Some content")]
        d = modified.delta_to(sample_source)
        assert not d.is_empty
        assert d.added_paths == ["README.md"]
        assert d.removed_paths == ["some.txt"]

    def test_duplicate_inputs_last_wins(self, sample_source: ArtifactSource):
        new = sample_source + [
            FileArtifact.from_string("animals/fox.txt", "first"),
            FileArtifact.from_string("animals/fox.txt", "second"),
        ]
        d = delta(sample_source, new)
        assert len(d.additions) == 1
        assert d.additions[0].content == b"second"

    def test_stable_for_equal_inputs(self, sample_source: ArtifactSource, other_source: ArtifactSource):
        assert delta(sample_source, other_source) == delta(sample_source, other_source)
