"""Path ownership queries against the system package database."""

from __future__ import annotations

import os
import subprocess
from typing import Protocol, runtime_checkable

import structlog

from debpack.exceptions import ToolError

log = structlog.get_logger("debpack.resolver")


@runtime_checkable
class PackageOwnerQuery(Protocol):
    def owner_of(self, path: str) -> str | None:
        """Return the single package owning *path*, or None."""
        ...


def parse_dpkg_search(output: str, path: str) -> set[str]:
    """Parse ``dpkg-query -S`` output into the set of owning package names.

    Lines look like ``pkg1, pkg2:amd64: /usr/share/perl5/Foo.pm``;
    diversion notices are ignored and architecture qualifiers dropped.
    """
    owners: set[str] = set()
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith(("diversion by", "local diversion")):
            continue
        if ": " not in line:
            continue
        packages, owned = line.rsplit(": ", 1)
        if owned != path:
            continue
        for name in packages.split(","):
            name = name.strip().split(":", 1)[0]
            if name:
                owners.add(name)
    return owners


class DpkgOwnerQuery:
    """Ask dpkg which installed package ships a file."""

    def __init__(self, dpkg_query: str = "dpkg-query") -> None:
        self.dpkg_query = dpkg_query
        self._cache: dict[str, str | None] = {}

    def _search(self, path: str) -> set[str]:
        try:
            result = subprocess.run(
                [self.dpkg_query, "-S", path],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ToolError(f"{self.dpkg_query} not found; is this a Debian system?") from e
        if result.returncode != 0:
            return set()
        return parse_dpkg_search(result.stdout, path)

    def owner_of(self, path: str) -> str | None:
        if path in self._cache:
            return self._cache[path]

        owners = self._search(path)
        if not owners:
            # usrmerge: /usr/lib/... may be registered as /lib/... or vice versa
            real = os.path.realpath(path)
            if real != path:
                owners = self._search(real)

        owner = next(iter(owners)) if len(owners) == 1 else None
        if len(owners) > 1:
            log.warning("resolver.ambiguous_owner", path=path, owners=sorted(owners))
        self._cache[path] = owner
        return owner
