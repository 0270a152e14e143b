"""External toolchain calls — the package's test suite and dpkg-buildpackage."""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from debpack.exceptions import BuildError, TestSuiteFailed, ToolError

log = structlog.get_logger("debpack.toolchain")

# Language -> test command, run from the source root against t/
TEST_COMMANDS: dict[str, list[str]] = {
    "perl": ["prove", "-lr", "t"],
    "python": ["python3", "-m", "pytest", "-q", "t"],
}

BUILD_COMMAND = ["dpkg-buildpackage", "-us", "-uc", "-b"]

_OUTPUT_TAIL = 2000


def _tail(text: str) -> str:
    return text[-_OUTPUT_TAIL:].strip()


def run_test_suite(source_dir: str | Path, language: str = "perl") -> None:
    """Run the package's tests in *source_dir*.

    Raises:
        TestSuiteFailed: the test command exited non-zero.
        ToolError: the test runner is not installed.
    """
    cmd = TEST_COMMANDS.get(language)
    if cmd is None:
        raise ToolError(f"No test runner configured for '{language}'")
    log.info("toolchain.tests_started", command=" ".join(cmd), cwd=str(source_dir))
    try:
        result = subprocess.run(cmd, cwd=str(source_dir), capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ToolError(f"Test runner not found: {cmd[0]}") from e
    if result.returncode != 0:
        raise TestSuiteFailed(
            f"Test suite failed (exit {result.returncode}):\n{_tail(result.stdout + result.stderr)}"
        )
    log.info("toolchain.tests_passed")


def build_package(build_dir: str | Path, package: str, version: str) -> list[Path]:
    """Run dpkg-buildpackage in *build_dir* and return the produced artifacts.

    dpkg-buildpackage writes its output next to the build directory, so the
    artifacts are collected from the parent by their ``<package>_<version>``
    prefix.

    Raises:
        BuildError: the toolchain is missing or exited non-zero.
    """
    build = Path(build_dir)
    log.info("toolchain.build_started", command=" ".join(BUILD_COMMAND), cwd=str(build))
    try:
        result = subprocess.run(BUILD_COMMAND, cwd=str(build), capture_output=True, text=True)
    except FileNotFoundError as e:
        raise BuildError(f"{BUILD_COMMAND[0]} not found; install dpkg-dev") from e
    if result.returncode != 0:
        raise BuildError(
            f"dpkg-buildpackage failed (exit {result.returncode}):\n"
            f"{_tail(result.stdout + result.stderr)}"
        )

    artifacts = sorted(p for p in build.parent.glob(f"{package}_{version}-*") if p.is_file())
    if not artifacts:
        raise BuildError(f"dpkg-buildpackage produced no artifacts for {package} {version}")
    log.info("toolchain.build_completed", artifacts=[p.name for p in artifacts])
    return artifacts
