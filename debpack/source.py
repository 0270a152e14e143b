"""Source acquisition — check out or locate the tree to package."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

import structlog

from debpack.config import SOURCE_GIT, SOURCE_SVN, RunConfig
from debpack.exceptions import AmbiguousSource, SourceError

log = structlog.get_logger("debpack.source")

# Marker entry -> VCS kind
_VCS_MARKERS: list[tuple[str, str]] = [
    (".git", SOURCE_GIT),
    (".svn", SOURCE_SVN),
    (".hg", "hg"),
    (".bzr", "bzr"),
]


@dataclass(frozen=True)
class SourceTree:
    """A source directory ready for inspection."""

    path: Path
    origin_url: str | None = None
    dirty: bool = False  # uncommitted working copy


def _run(cmd: list[str], cwd: Path | None = None) -> str:
    """Run a VCS command and return stdout, raising SourceError on failure."""
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise SourceError(f"{cmd[0]} is not installed") from e
    except subprocess.CalledProcessError as e:
        raise SourceError(
            f"{cmd[0]} command failed (exit {e.returncode}): {e.stderr.strip()}"
        ) from e
    return result.stdout


def detect_vcs(path: Path) -> list[str]:
    """Return the VCS kinds whose metadata sits at the top of *path*."""
    return [kind for marker, kind in _VCS_MARKERS if (path / marker).exists()]


def clone_git(repo_url: str, revision: str | None, target: Path) -> Path:
    """Clone *repo_url* into *target* and check out *revision*."""
    if revision:
        try:
            _run(["git", "clone", "--depth", "1", "--branch", revision, "--", repo_url, str(target)])
            return target
        except SourceError:
            # --branch fails for commit hashes; fall back to full clone + checkout
            shutil.rmtree(target, ignore_errors=True)
    _run(["git", "clone", "--", repo_url, str(target)])
    if revision:
        _run(["git", "-C", str(target), "checkout", revision])
    return target


def checkout_svn(repo_url: str, revision: str | None, target: Path) -> Path:
    cmd = ["svn", "checkout", "--quiet"]
    if revision:
        cmd += ["--revision", revision]
    _run(cmd + [repo_url, str(target)])
    return target


def _local_origin(path: Path, kind: str) -> tuple[str | None, bool]:
    """Origin URL and dirty flag of a working copy."""
    if kind == SOURCE_GIT:
        try:
            origin = _run(["git", "-C", str(path), "config", "--get", "remote.origin.url"]).strip()
        except SourceError:
            origin = ""
        status = _run(["git", "-C", str(path), "status", "--porcelain"])
        return origin or None, bool(status.strip())
    if kind == SOURCE_SVN:
        origin = _run(["svn", "info", "--show-item", "url", str(path)]).strip()
        status = _run(["svn", "status", "--quiet", str(path)])
        return origin or None, bool(status.strip())
    return None, True


def acquire_source(config: RunConfig, workdir: Path) -> SourceTree:
    """Produce the source tree described by *config*.

    Remote modes check out into *workdir*. Local mode uses the directory in
    place; it fails closed when several VCS are detectable, and a directory
    with no VCS at all counts as an uncommitted working copy.

    Raises:
        SourceError: checkout failed or the local path is not a directory.
        AmbiguousSource: several VCS origins and no explicit selection.
    """
    if config.source_mode == SOURCE_GIT:
        target = clone_git(config.source, config.revision, workdir / "src")
        log.info("source.cloned", url=config.source, revision=config.revision)
        return SourceTree(path=target, origin_url=config.source)

    if config.source_mode == SOURCE_SVN:
        target = checkout_svn(config.source, config.revision, workdir / "src")
        log.info("source.checked_out", url=config.source, revision=config.revision)
        return SourceTree(path=target, origin_url=config.source)

    path = Path(config.source).resolve()
    if not path.is_dir():
        raise SourceError(f"Source directory not found: {config.source}")

    kinds = detect_vcs(path)
    if len(kinds) > 1:
        raise AmbiguousSource(str(path), kinds)
    kind = kinds[0] if kinds else None
    origin, dirty = _local_origin(path, kind) if kind else (None, True)
    log.info("source.local", path=str(path), vcs=kind, origin=origin, dirty=dirty)
    return SourceTree(path=path, origin_url=origin, dirty=dirty)
