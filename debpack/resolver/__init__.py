"""Dependency resolver — imported modules to system packages."""

from debpack.resolver.locator import (
    ModuleLocation,
    ModuleLocator,
    PerlModuleLocator,
    PythonModuleLocator,
    create_locator,
)
from debpack.resolver.ownership import DpkgOwnerQuery, PackageOwnerQuery
from debpack.resolver.resolver import DependencyResolver, reconcile

__all__ = [
    "DependencyResolver",
    "DpkgOwnerQuery",
    "ModuleLocation",
    "ModuleLocator",
    "PackageOwnerQuery",
    "PerlModuleLocator",
    "PythonModuleLocator",
    "create_locator",
    "reconcile",
]
