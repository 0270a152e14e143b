"""Control file generator — render and write the debian/ directory."""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path

import structlog

from debpack.generator.templates import (
    BUILD_DEPENDS,
    CHANGELOG_TEMPLATE,
    COMPAT_LEVEL,
    DEBIAN_REVISION,
    DISTRIBUTION,
    INSTALL_PREFIXES,
    INSTALL_STEP_TEMPLATE,
    PRIORITY,
    RULES_TEMPLATE,
    RUNTIME_DEPENDENCY,
    SECTION,
    STANDARDS_VERSION,
    URGENCY,
)
from debpack.exceptions import BuildError
from debpack.layout import CHANGES_FILE, LAYOUT_RULES
from debpack.manifest import MANIFEST_FILE
from debpack.models.package import PackageDescriptor

log = structlog.get_logger("debpack.generator")

ARTIFACTS = ("changelog", "control", "rules", "compat")

_VCS_IGNORE = shutil.ignore_patterns(".git", ".svn", ".hg", ".bzr", "CVS")


def format_relation(name: str, constraint: str | None) -> str:
    """``name`` or ``name (constraint)``."""
    return f"{name} ({constraint})" if constraint else name


def format_relations(field: str, entries: list[str]) -> str:
    """Render a relationship field, one entry per continuation line."""
    indent = " " * (len(field) + 2)
    return f"{field}: " + f",\n{indent}".join(entries)


def _relations(mapping: Mapping[str, str | None]) -> list[str]:
    return [format_relation(name, constraint) for name, constraint in mapping.items()]


def _description(descriptor: PackageDescriptor) -> str:
    text = descriptor.description.strip() or descriptor.name
    lines = text.splitlines()
    extended = "\n".join(f" {line}" if line.strip() else " ." for line in lines)
    return f"Description: {lines[0]}\n{extended}"


class ControlFileGenerator:
    """Render changelog, control, rules and compat for a package descriptor.

    Output depends only on the descriptor, the maintainer identity and the
    timestamp, so the same inputs always give byte-identical files.
    """

    def __init__(self, maintainer_name: str, maintainer_email: str) -> None:
        self.maintainer = f"{maintainer_name} <{maintainer_email}>"

    def render_changelog(self, descriptor: PackageDescriptor, timestamp: datetime) -> str:
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return CHANGELOG_TEMPLATE.format(
            package=descriptor.name,
            version=descriptor.version,
            revision=DEBIAN_REVISION,
            distribution=DISTRIBUTION,
            urgency=URGENCY,
            origin=descriptor.origin_url or "local source",
            maintainer=self.maintainer,
            date=format_datetime(timestamp),
        )

    def render_control(self, descriptor: PackageDescriptor) -> str:
        source = [
            f"Source: {descriptor.name}",
            f"Section: {SECTION}",
            f"Priority: {PRIORITY}",
            f"Maintainer: {self.maintainer}",
            f"Build-Depends: {BUILD_DEPENDS}",
            f"Standards-Version: {STANDARDS_VERSION}",
        ]
        if descriptor.origin_url:
            source.append(f"Homepage: {descriptor.origin_url}")

        binary = [
            f"Package: {descriptor.name}",
            "Architecture: all",
            format_relations("Depends", [RUNTIME_DEPENDENCY, *_relations(descriptor.requires)]),
        ]
        # An empty Conflicts field is invalid in a control file
        if descriptor.conflicts:
            binary.append(format_relations("Conflicts", _relations(descriptor.conflicts)))
        binary.append(_description(descriptor))
        if descriptor.origin_url:
            binary.append(f"Homepage: {descriptor.origin_url}")

        return "\n".join(source) + "\n\n" + "\n".join(binary) + "\n"

    def render_rules(self, descriptor: PackageDescriptor) -> str:
        steps = [
            INSTALL_STEP_TEMPLATE.format(package=descriptor.name, prefix=prefix, role=role)
            for role, prefix in INSTALL_PREFIXES
            if descriptor.has_role(role)
        ]
        return RULES_TEMPLATE.format(install_steps="".join(steps).rstrip("\n"))

    def render_compat(self) -> str:
        return COMPAT_LEVEL + "\n"

    def render(self, descriptor: PackageDescriptor, timestamp: datetime) -> dict[str, str]:
        """Render all four artifacts, keyed by their file name under debian/."""
        return {
            "changelog": self.render_changelog(descriptor, timestamp),
            "control": self.render_control(descriptor),
            "rules": self.render_rules(descriptor),
            "compat": self.render_compat(),
        }

    def write(
        self,
        descriptor: PackageDescriptor,
        source_dir: str | Path,
        build_dir: str | Path,
        timestamp: datetime,
    ) -> Path:
        """Stage the package's roles into *build_dir* and write debian/ there.

        An existing *build_dir* is replaced, so nothing from an earlier run
        survives. Returns the path of the written debian/ directory.

        Raises:
            BuildError: *build_dir* is, or contains, *source_dir*.
        """
        src = Path(source_dir)
        dest = Path(build_dir)
        if dest.resolve() in (src.resolve(), *src.resolve().parents):
            raise BuildError(f"Refusing to replace {dest}: it contains the source tree")
        if dest.exists():
            log.debug("generator.build_dir_replaced", path=str(dest))
            shutil.rmtree(dest)
        dest.mkdir(parents=True)

        for entry, role, is_dir in LAYOUT_RULES:
            if not descriptor.has_role(role):
                continue
            if is_dir:
                shutil.copytree(src / entry, dest / entry, ignore=_VCS_IGNORE)
            elif entry in (MANIFEST_FILE, CHANGES_FILE):
                shutil.copy2(src / entry, dest / entry)

        debian = dest / "debian"
        debian.mkdir()
        for name, text in self.render(descriptor, timestamp).items():
            (debian / name).write_text(text, encoding="utf-8")
        (debian / "rules").chmod(0o755)

        log.info("generator.written", package=descriptor.name, debian_dir=str(debian))
        return debian
