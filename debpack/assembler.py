"""Package descriptor assembly."""

from __future__ import annotations

from collections.abc import Mapping

from debpack.models.manifest import Manifest
from debpack.models.package import PackageDescriptor


def assemble_descriptor(
    manifest: Manifest,
    version: str,
    layout: frozenset[str],
    origin_url: str | None = None,
    requires: Mapping[str, str | None] | None = None,
) -> PackageDescriptor:
    """Merge manifest, version and layout into a PackageDescriptor.

    *requires* overrides the manifest's declared mapping, typically with the
    reconciled mapping returned by :func:`debpack.resolver.reconcile`.
    """
    return PackageDescriptor(
        name=manifest.package,
        description=manifest.description,
        version=version,
        layout=layout,
        requires=dict(manifest.requires if requires is None else requires),
        conflicts=dict(manifest.conflicts),
        ignore_modules=frozenset(manifest.perl_ignore),
        origin_url=origin_url,
    )
