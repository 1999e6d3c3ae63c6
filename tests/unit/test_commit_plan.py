"""Tests for the commit planner: dedupe, ignored deletes, adds-win tie-break."""

from __future__ import annotations

from artifactsource.core.artifact_source import ArtifactSource
from artifactsource.core.differ import delta
from artifactsource.git.commit import dedupe_last_wins, plan_commit, plan_from_delta
from artifactsource.models.artifacts import FileArtifact


def _f(path: str, text: str = "x") -> FileArtifact:
    return FileArtifact.from_string(path, text)


class TestPlanCommit:
    def test_dedupe_last_wins(self):
        files = dedupe_last_wins([_f("a", "1"), _f("b"), _f("a", "2")])
        assert [f.path for f in files] == ["a", "b"]
        assert files[0].content == b"2"

    def test_deletes_of_unknown_paths_are_ignored(self):
        plan = plan_commit({"README.md", "old.txt"}, [], ["old.txt", "bogus.txt"])
        assert plan.deletes == ("old.txt",)

    def test_adds_win_over_deletes(self):
        plan = plan_commit({"placeholder.txt"}, [_f("placeholder.txt", "new")], ["placeholder.txt"])
        assert plan.deletes == ()
        assert [f.path for f in plan.writes] == ["placeholder.txt"]

    def test_deletes_accept_artifacts_and_collapse_duplicates(self):
        plan = plan_commit({"a", "b"}, [], [_f("a"), "a", "b", "../bad"])
        assert plan.deletes == ("a", "b")

    def test_empty_plan(self):
        assert plan_commit(set(), [], ["x"]).is_empty


class TestPlanFromDelta:
    def test_writes_additions_and_updates_deletes_removals(self):
        old = ArtifactSource.of(_f("keep"), _f("change", "1"), _f("gone"))
        new = ArtifactSource.of(_f("keep"), _f("change", "2"), _f("added"))
        plan = plan_from_delta(delta(old, new))
        assert sorted(f.path for f in plan.writes) == ["added", "change"]
        assert plan.deletes == ("gone",)
