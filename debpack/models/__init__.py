"""Data models for debpack."""

from debpack.models.manifest import Manifest
from debpack.models.package import (
    CONTENT_ROLES,
    PackageDescriptor,
    ResolutionResult,
    ResolvedDependency,
)

__all__ = [
    "CONTENT_ROLES",
    "Manifest",
    "PackageDescriptor",
    "ResolutionResult",
    "ResolvedDependency",
]
