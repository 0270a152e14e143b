"""Version extraction from the package's changes record."""

from __future__ import annotations

import re
from pathlib import Path

from debpack.exceptions import MalformedVersion

VERSION_RE = re.compile(r"[0-9]+(?:\.[0-9]+)*")

DIRTY_SUFFIX = "+dirty"


def parse_version(text: str) -> str:
    """Return the version on the first non-blank line of *text*.

    The line is trimmed and must be dotted numbers (``1``, ``1.2``, ``1.2.3``).
    No ordering or semantic checks are made.

    Raises:
        MalformedVersion: the line is anything else (``v1.2``, ``1.2-beta``, empty).
    """
    first = ""
    for raw_line in text.splitlines():
        if raw_line.strip():
            first = raw_line.strip()
            break
    if not VERSION_RE.fullmatch(first):
        raise MalformedVersion(first)
    return first


def read_version(path: Path) -> str:
    return parse_version(path.read_text(encoding="utf-8", errors="replace"))


def apply_dirty_suffix(version: str, dirty: bool) -> str:
    """Mark *version* as built from an uncommitted working copy."""
    if dirty and not version.endswith(DIRTY_SUFFIX):
        return version + DIRTY_SUFFIX
    return version


def strip_dirty_suffix(version: str) -> str:
    if version.endswith(DIRTY_SUFFIX):
        return version[: -len(DIRTY_SUFFIX)]
    return version
