"""Unit tests for the CLI — command registration and behavior via CliRunner."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from artifactsource.cli.app import app
from artifactsource.cli.commands import clone as clone_module
from artifactsource.core.errors import CloneFailedError

runner = CliRunner()


def _tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text)
    return root


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("ls", "diff", "copy", "clone", "sniff"):
            assert name in result.output


# ---------------------------------------------------------------------------
# Test: commands
# ---------------------------------------------------------------------------


class TestLs:
    def test_lists_directory(self, tmp_path: Path):
        _tree(tmp_path, {"a.txt": "a", "sub/b.txt": "b"})
        result = runner.invoke(app, ["ls", str(tmp_path)])
        assert result.exit_code == 0
        assert "a.txt" in result.output
        assert "2 files" in result.output

    def test_lists_zip(self, tmp_path: Path, make_zip):
        archive = tmp_path / "x.zip"
        archive.write_bytes(make_zip({"z.txt": b"z"}))
        result = runner.invoke(app, ["ls", str(archive)])
        assert result.exit_code == 0
        assert "z.txt" in result.output

    def test_missing_path(self, tmp_path: Path):
        result = runner.invoke(app, ["ls", str(tmp_path / "nope")])
        assert result.exit_code == 1


class TestDiff:
    def test_equal_sources(self, tmp_path: Path):
        old = _tree(tmp_path / "old", {"a.txt": "a"})
        new = _tree(tmp_path / "new", {"a.txt": "a"})
        result = runner.invoke(app, ["diff", str(old), str(new)])
        assert result.exit_code == 0
        assert "No differences" in result.output

    def test_reports_changes(self, tmp_path: Path):
        old = _tree(tmp_path / "old", {"keep.txt": "k", "gone.txt": "g", "edit.txt": "1"})
        new = _tree(tmp_path / "new", {"keep.txt": "k", "added.txt": "n", "edit.txt": "2"})
        result = runner.invoke(app, ["diff", str(old), str(new)])
        assert result.exit_code == 1
        assert "+ added.txt" in result.output
        assert "- gone.txt" in result.output
        assert "~ edit.txt" in result.output

    def test_exclude_hides_changes(self, tmp_path: Path):
        old = _tree(tmp_path / "old", {"a.txt": "a"})
        new = _tree(tmp_path / "new", {"a.txt": "a", "build.log": "noise"})
        result = runner.invoke(app, ["diff", str(old), str(new), "-x", "*.log"])
        assert result.exit_code == 0

    def test_unreadable_source(self, tmp_path: Path):
        result = runner.invoke(app, ["diff", str(tmp_path / "a"), str(tmp_path / "b")])
        assert result.exit_code == 2


class TestCopy:
    def test_copies_tree(self, tmp_path: Path):
        src = _tree(tmp_path / "src", {"a.txt": "a", "deep/b.txt": "b"})
        dest = tmp_path / "dest"
        result = runner.invoke(app, ["copy", str(src), str(dest)])
        assert result.exit_code == 0
        assert (dest / "deep" / "b.txt").read_text() == "b"
        assert "Copied 2 files" in result.output


class TestSniff:
    def test_text_and_binary(self, tmp_path: Path):
        text = tmp_path / "t.txt"
        text.write_text("plain words\n")
        binary = tmp_path / "b.bin"
        binary.write_bytes(b"\x00\x01\x02")
        assert runner.invoke(app, ["sniff", str(text)]).output.strip() == "text"
        assert runner.invoke(app, ["sniff", str(binary)]).output.strip() == "binary"

    def test_not_a_file(self, tmp_path: Path):
        result = runner.invoke(app, ["sniff", str(tmp_path)])
        assert result.exit_code == 1


class TestClone:
    def test_prints_clone_directory(self, monkeypatch, tmp_path: Path):
        seen = {}

        def fake_clone(self, repo, owner, branch=None, sha=None, directory=None, depth=None):
            seen.update(repo=repo, owner=owner, branch=branch, depth=depth)
            return tmp_path

        monkeypatch.setattr(clone_module.GitRepositoryCloner, "clone_directory", fake_clone)
        result = runner.invoke(app, ["clone", "acme", "widgets", "-b", "dev", "-d", "3"])
        assert result.exit_code == 0
        assert seen == {"repo": "widgets", "owner": "acme", "branch": "dev", "depth": 3}

    def test_failure_exits_nonzero(self, monkeypatch):
        def failing(self, *args, **kwargs):
            raise CloneFailedError("Failed to clone acme/widgets", return_code=128)

        monkeypatch.setattr(clone_module.GitRepositoryCloner, "clone_directory", failing)
        result = runner.invoke(app, ["clone", "acme", "widgets"])
        assert result.exit_code == 1
        assert "Clone failed" in result.output
