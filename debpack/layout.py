"""Source layout inspection — classify top-level entries into package roles."""

from __future__ import annotations

from pathlib import Path

import structlog

from debpack.exceptions import EmptyPackageLayout, MissingChangelog, MissingManifest
from debpack.manifest import MANIFEST_FILE
from debpack.models.package import (
    CONTENT_ROLES,
    ROLE_BIN,
    ROLE_CHANGES,
    ROLE_ETC,
    ROLE_LIB,
    ROLE_MANIFEST,
    ROLE_TESTS,
    ROLE_VAR,
)

log = structlog.get_logger("debpack.layout")

CHANGES_FILE = "Changes"

# (entry name, role, is_directory)
LAYOUT_RULES: list[tuple[str, str, bool]] = [
    ("bin", ROLE_BIN, True),
    ("etc", ROLE_ETC, True),
    ("lib", ROLE_LIB, True),
    ("var", ROLE_VAR, True),
    ("t", ROLE_TESTS, True),
    (MANIFEST_FILE, ROLE_MANIFEST, False),
    (CHANGES_FILE, ROLE_CHANGES, False),
]


class LayoutInspector:
    """Detect which package roles a source tree provides."""

    def inspect(self, source_dir: str | Path) -> frozenset[str]:
        """Return the set of roles present in *source_dir*.

        Raises:
            FileNotFoundError: *source_dir* is not a directory.
            MissingManifest: no package.yml.
            MissingChangelog: no Changes file.
            EmptyPackageLayout: none of bin/, etc/, lib/ exist.
        """
        root = Path(source_dir)
        if not root.is_dir():
            raise FileNotFoundError(f"Source directory not found: {source_dir}")

        roles = set()
        for entry, role, is_dir in LAYOUT_RULES:
            path = root / entry
            if path.is_dir() if is_dir else path.is_file():
                roles.add(role)

        if ROLE_MANIFEST not in roles:
            raise MissingManifest(str(root / MANIFEST_FILE))
        if ROLE_CHANGES not in roles:
            raise MissingChangelog(str(root / CHANGES_FILE))
        if not roles.intersection(CONTENT_ROLES):
            raise EmptyPackageLayout(str(root), list(CONTENT_ROLES))

        log.info("layout.detected", source_dir=str(root), roles=sorted(roles))
        return frozenset(roles)
