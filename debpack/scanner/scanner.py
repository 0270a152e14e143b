"""Module usage scanner — collect the modules a source tree imports."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import structlog

# Ensure extractors are registered before any scan runs.
import debpack.scanner.extractors  # noqa: F401
from debpack.models.package import ROLE_BIN, ROLE_LIB
from debpack.scanner.registry import ImportExtractor, get_extractor

log = structlog.get_logger("debpack.scanner")

# VCS metadata, never scanned
_SKIP_DIRS = {".git", ".svn", ".hg", ".bzr", "CVS", "_darcs"}


def _is_script(path: Path, interpreter: str) -> bool:
    """Executable file, or a file whose #! line names *interpreter*."""
    if path.stat().st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
        return True
    with path.open("rb") as fh:
        first = fh.readline(256)
    return first.startswith(b"#!") and interpreter.encode() in first


def _walk_files(root: Path) -> list[Path]:
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in _SKIP_DIRS]
        for f in filenames:
            files.append(Path(dirpath) / f)
    return files


def iter_source_files(
    source_dir: str | Path,
    layout: frozenset[str],
    extractor: ImportExtractor,
) -> list[Path]:
    """Return the files to scan, sorted.

    Scripts under bin/ (executable, or with a matching ``#!`` line) and
    library files under lib/ (by suffix). Symlinks and VCS metadata are
    skipped.
    """
    root = Path(source_dir)
    matched: list[Path] = []

    if ROLE_BIN in layout:
        for path in _walk_files(root / "bin"):
            if path.is_file() and not path.is_symlink() and _is_script(path, extractor.interpreter):
                matched.append(path)

    if ROLE_LIB in layout:
        for path in _walk_files(root / "lib"):
            if (
                path.is_file()
                and not path.is_symlink()
                and path.suffix in extractor.library_suffixes
            ):
                matched.append(path)

    return sorted(matched)


class ModuleUsageScanner:
    """Extract the union of imported module names across a source tree."""

    def __init__(self, extractor: ImportExtractor | None = None) -> None:
        self.extractor = extractor or get_extractor()

    def scan(self, source_dir: str | Path, layout: frozenset[str]) -> frozenset[str]:
        files = iter_source_files(source_dir, layout, self.extractor)
        modules: set[str] = set()
        for file_path in files:
            content = file_path.read_text(encoding="utf-8", errors="replace")
            found = self.extractor.extract_imports(file_path, content)
            log.debug("scanner.file_scanned", file=str(file_path), imports=len(found))
            modules.update(found)

        log.info(
            "scanner.completed",
            language=self.extractor.language,
            files=len(files),
            modules=len(modules),
        )
        return frozenset(modules)
