"""Shared pytest fixtures for debpack tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def make_source_tree(tmp_path: Path):
    """Build a minimal Perl source tree; returns a factory taking file overrides."""

    def _make(
        manifest: str | None = "package: libfoo-perl\ndescription: Foo tools\n",
        changes: str | None = "1.2.3\n\n - initial\n",
        files: dict[str, str] | None = None,
        dirs: tuple[str, ...] = (),
    ) -> Path:
        root = tmp_path / "src"
        root.mkdir(exist_ok=True)
        if manifest is not None:
            (root / "package.yml").write_text(manifest)
        if changes is not None:
            (root / "Changes").write_text(changes)
        for d in dirs:
            (root / d).mkdir(parents=True, exist_ok=True)
        for rel, content in (files or {}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return _make
