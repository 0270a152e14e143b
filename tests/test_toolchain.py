"""Tests for the test-suite and dpkg-buildpackage wrappers — subprocess mocked."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from debpack.exceptions import BuildError, TestSuiteFailed, ToolError
from debpack.toolchain import build_package, run_test_suite


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunTestSuite:
    def test_passes(self, tmp_path):
        with patch("debpack.toolchain.subprocess.run", return_value=_completed()) as run:
            run_test_suite(tmp_path)
        assert run.call_args[0][0] == ["prove", "-lr", "t"]
        assert run.call_args[1]["cwd"] == str(tmp_path)

    def test_failure(self, tmp_path):
        result = _completed(1, stdout="not ok 1 - frobnicates\n")
        with patch("debpack.toolchain.subprocess.run", return_value=result):
            with pytest.raises(TestSuiteFailed, match="not ok 1"):
                run_test_suite(tmp_path)

    def test_runner_missing(self, tmp_path):
        with patch("debpack.toolchain.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(ToolError, match="prove"):
                run_test_suite(tmp_path)

    def test_unknown_language(self, tmp_path):
        with pytest.raises(ToolError):
            run_test_suite(tmp_path, "cobol")


class TestBuildPackage:
    def test_collects_artifacts(self, tmp_path):
        build_dir = tmp_path / "libfoo-perl-1.0"
        build_dir.mkdir()

        def fake_run(cmd, cwd, capture_output, text):
            for name in ("libfoo-perl_1.0-1_all.deb", "libfoo-perl_1.0-1_amd64.changes"):
                (tmp_path / name).write_text("x")
            (tmp_path / "other_2.0-1_all.deb").write_text("x")
            return _completed()

        with patch("debpack.toolchain.subprocess.run", side_effect=fake_run):
            artifacts = build_package(build_dir, "libfoo-perl", "1.0")
        assert [a.name for a in artifacts] == [
            "libfoo-perl_1.0-1_all.deb",
            "libfoo-perl_1.0-1_amd64.changes",
        ]

    def test_failure(self, tmp_path):
        with patch("debpack.toolchain.subprocess.run", return_value=_completed(2, stderr="dh: error")):
            with pytest.raises(BuildError, match="dh: error"):
                build_package(tmp_path, "libfoo-perl", "1.0")

    def test_no_artifacts(self, tmp_path):
        build_dir = tmp_path / "b"
        build_dir.mkdir()
        with patch("debpack.toolchain.subprocess.run", return_value=_completed()):
            with pytest.raises(BuildError, match="no artifacts"):
                build_package(build_dir, "libfoo-perl", "1.0")

    def test_toolchain_missing(self, tmp_path):
        with patch("debpack.toolchain.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(BuildError, match="dpkg-dev"):
                build_package(tmp_path, "libfoo-perl", "1.0")
