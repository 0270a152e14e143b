"""Tests for source acquisition — VCS commands mocked."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from debpack.config import RunConfig
from debpack.exceptions import AmbiguousSource, SourceError
from debpack.source import acquire_source, clone_git, detect_vcs


def _completed(stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


def _failed(cmd: list[str]) -> subprocess.CalledProcessError:
    return subprocess.CalledProcessError(128, cmd, output="", stderr="fatal: nope")


class TestDetectVcs:
    def test_none(self, tmp_path):
        assert detect_vcs(tmp_path) == []

    def test_git_and_svn(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".svn").mkdir()
        assert detect_vcs(tmp_path) == ["git", "svn"]

    def test_git_worktree_file(self, tmp_path):
        (tmp_path / ".git").write_text("gitdir: /elsewhere\n")
        assert detect_vcs(tmp_path) == ["git"]


class TestLocalSource:
    def test_plain_directory_is_dirty(self, tmp_path):
        tree = acquire_source(RunConfig(source=str(tmp_path)), tmp_path / "work")
        assert tree.path == tmp_path.resolve()
        assert tree.origin_url is None
        assert tree.dirty

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SourceError, match="not found"):
            acquire_source(RunConfig(source=str(tmp_path / "nope")), tmp_path)

    def test_ambiguous_vcs_fails_closed(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".svn").mkdir()
        with pytest.raises(AmbiguousSource) as exc:
            acquire_source(RunConfig(source=str(tmp_path)), tmp_path / "work")
        assert exc.value.kinds == ["git", "svn"]

    def test_clean_git_checkout(self, tmp_path):
        (tmp_path / ".git").mkdir()
        with patch("debpack.source.subprocess.run") as run:
            run.side_effect = [_completed("https://git.example.org/foo.git\n"), _completed("")]
            tree = acquire_source(RunConfig(source=str(tmp_path)), tmp_path / "work")
        assert tree.origin_url == "https://git.example.org/foo.git"
        assert not tree.dirty

    def test_dirty_git_checkout_without_remote(self, tmp_path):
        (tmp_path / ".git").mkdir()
        with patch("debpack.source.subprocess.run") as run:
            run.side_effect = [_failed(["git"]), _completed(" M lib/Foo.pm\n")]
            tree = acquire_source(RunConfig(source=str(tmp_path)), tmp_path / "work")
        assert tree.origin_url is None
        assert tree.dirty

    def test_svn_working_copy(self, tmp_path):
        (tmp_path / ".svn").mkdir()
        with patch("debpack.source.subprocess.run") as run:
            run.side_effect = [_completed("https://svn.example.org/foo/trunk\n"), _completed("")]
            tree = acquire_source(RunConfig(source=str(tmp_path)), tmp_path / "work")
        assert tree.origin_url == "https://svn.example.org/foo/trunk"
        assert not tree.dirty


class TestRemoteSource:
    def test_git_clone(self, tmp_path):
        config = RunConfig(source_mode="git", source="https://git.example.org/foo.git")
        with patch("debpack.source.subprocess.run", return_value=_completed()) as run:
            tree = acquire_source(config, tmp_path)
        assert tree.path == tmp_path / "src"
        assert tree.origin_url == "https://git.example.org/foo.git"
        assert run.call_args[0][0] == ["git", "clone", "--", "https://git.example.org/foo.git", str(tmp_path / "src")]

    def test_git_commit_falls_back_to_full_clone(self, tmp_path):
        target = tmp_path / "src"
        with patch("debpack.source.subprocess.run") as run:
            run.side_effect = [_failed(["git"]), _completed(), _completed()]
            clone_git("https://git.example.org/foo.git", "abc123", target)
        commands = [c[0][0] for c in run.call_args_list]
        assert commands[0][:5] == ["git", "clone", "--depth", "1", "--branch"]
        assert commands[1] == ["git", "clone", "--", "https://git.example.org/foo.git", str(target)]
        assert commands[2] == ["git", "-C", str(target), "checkout", "abc123"]

    def test_svn_checkout_with_revision(self, tmp_path):
        config = RunConfig(source_mode="svn", source="https://svn.example.org/foo/trunk", revision="42")
        with patch("debpack.source.subprocess.run", return_value=_completed()) as run:
            tree = acquire_source(config, tmp_path)
        assert run.call_args[0][0] == [
            "svn", "checkout", "--quiet", "--revision", "42",
            "https://svn.example.org/foo/trunk", str(tmp_path / "src"),
        ]
        assert tree.origin_url == "https://svn.example.org/foo/trunk"

    def test_clone_failure(self, tmp_path):
        config = RunConfig(source_mode="git", source="https://git.example.org/missing.git")
        with patch("debpack.source.subprocess.run", side_effect=_failed(["git"])):
            with pytest.raises(SourceError, match="fatal: nope"):
                acquire_source(config, tmp_path)

    def test_vcs_not_installed(self, tmp_path):
        config = RunConfig(source_mode="svn", source="https://svn.example.org/foo")
        with patch("debpack.source.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(SourceError, match="svn is not installed"):
                acquire_source(config, tmp_path)
