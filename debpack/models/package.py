"""Data models for the package descriptor and dependency resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from debpack.exceptions import BadFieldShape, EmptyPackageLayout, MalformedVersion
from debpack.version import VERSION_RE, strip_dirty_suffix

# Layout role tags
ROLE_BIN = "bin"
ROLE_ETC = "etc"
ROLE_LIB = "lib"
ROLE_VAR = "var"
ROLE_TESTS = "t"
ROLE_MANIFEST = "manifest"
ROLE_CHANGES = "changes"

CONTENT_ROLES = (ROLE_BIN, ROLE_ETC, ROLE_LIB)
MANDATORY_ROLES = (ROLE_MANIFEST, ROLE_CHANGES)


def _flat_mapping(field_name: str, value: Mapping) -> Mapping[str, str | None]:
    if not isinstance(value, Mapping):
        raise BadFieldShape(field_name, "a mapping of package name to version constraint")
    for name, constraint in value.items():
        if not isinstance(name, str) or not (constraint is None or isinstance(constraint, str)):
            raise BadFieldShape(field_name, "a mapping of package name to version constraint")
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class PackageDescriptor:
    """Everything the control file generator needs to know about one package."""

    name: str
    description: str
    version: str  # "1.2.3" or "1.2.3+dirty"
    layout: frozenset[str]
    requires: Mapping[str, str | None] = field(default_factory=dict)
    conflicts: Mapping[str, str | None] = field(default_factory=dict)
    ignore_modules: frozenset[str] = frozenset()
    origin_url: str | None = None

    def __post_init__(self) -> None:
        missing = [r for r in MANDATORY_ROLES if r not in self.layout]
        if missing or not any(r in self.layout for r in CONTENT_ROLES):
            raise EmptyPackageLayout(self.name, list(CONTENT_ROLES))
        if not VERSION_RE.fullmatch(strip_dirty_suffix(self.version)):
            raise MalformedVersion(self.version)
        object.__setattr__(self, "layout", frozenset(self.layout))
        object.__setattr__(self, "requires", _flat_mapping("requires", self.requires))
        object.__setattr__(self, "conflicts", _flat_mapping("conflicts", self.conflicts))
        object.__setattr__(self, "ignore_modules", frozenset(self.ignore_modules))

    def has_role(self, role: str) -> bool:
        return role in self.layout


@dataclass
class ResolvedDependency:
    """Resolution record for a single imported module."""

    symbol_name: str
    providing_package: str | None = None
    is_core_runtime: bool = False
    is_self_provided: bool = False
    provider_path: str | None = None  # file the module was found in


@dataclass
class ResolutionResult:
    """Output of the dependency resolver."""

    packages: frozenset[str]
    records: list[ResolvedDependency] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
