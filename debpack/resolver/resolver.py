"""Dependency resolver — map imported modules to system packages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

import structlog

from debpack.exceptions import UndeclaredDependency, UnresolvableModule, UnresolvablePackage
from debpack.models.package import ROLE_LIB, ResolutionResult, ResolvedDependency
from debpack.resolver.locator import ModuleLocator
from debpack.resolver.ownership import PackageOwnerQuery

log = structlog.get_logger("debpack.resolver")


class DependencyResolver:
    """Resolve module names to the packages that provide them.

    Modules are processed in sorted order. Each one is either ignored
    (listed in the manifest), part of the language core, shipped in the
    package's own lib/, or owned by exactly one installed package.
    Anything else stops the run.
    """

    def __init__(self, locator: ModuleLocator, owner_query: PackageOwnerQuery) -> None:
        self.locator = locator
        self.owner_query = owner_query

    def resolve(
        self,
        modules: Iterable[str],
        ignore_modules: Iterable[str],
        source_dir: str | Path,
        layout: frozenset[str],
    ) -> ResolutionResult:
        """Resolve *modules* to a deduplicated set of package names.

        Raises:
            UnresolvableModule: no file implements the module.
            UnresolvablePackage: the module's file has no single owning package.
        """
        ignore = set(ignore_modules)
        own_lib = Path(source_dir).resolve() / "lib" if ROLE_LIB in layout else None

        records: list[ResolvedDependency] = []
        ignored: list[str] = []
        packages: set[str] = set()

        for module in sorted(set(modules)):
            if module in ignore:
                ignored.append(module)
                continue

            location = self.locator.locate(module)
            if location is None:
                raise UnresolvableModule(module)

            record = ResolvedDependency(symbol_name=module, provider_path=str(location.path))
            records.append(record)

            if location.is_core:
                record.is_core_runtime = True
                continue
            if own_lib is not None and self._is_self_provided(location.path, own_lib):
                record.is_self_provided = True
                continue

            owner = self.owner_query.owner_of(str(location.path))
            if owner is None:
                raise UnresolvablePackage(module, str(location.path))
            record.providing_package = owner
            packages.add(owner)
            log.debug("resolver.module_resolved", module=module, package=owner)

        log.info(
            "resolver.completed",
            modules=len(records),
            ignored=len(ignored),
            packages=sorted(packages),
        )
        return ResolutionResult(packages=frozenset(packages), records=records, ignored=ignored)

    @staticmethod
    def _is_self_provided(path: Path, own_lib: Path) -> bool:
        try:
            path.resolve().relative_to(own_lib)
            return True
        except ValueError:
            return False


def reconcile(
    requires: Mapping[str, str | None],
    packages: Iterable[str],
    strict: bool = False,
) -> tuple[dict[str, str | None], list[str]]:
    """Make *requires* a superset of the discovered *packages*.

    Declared entries keep their order and constraints; undeclared packages
    are appended unconstrained, in sorted order, and returned as the second
    element. In *strict* mode the first undeclared package is fatal.

    Raises:
        UndeclaredDependency: strict mode and a package is not declared.
    """
    reconciled = dict(requires)
    added: list[str] = []
    for package in sorted(set(packages)):
        if package in reconciled:
            continue
        if strict:
            raise UndeclaredDependency(package)
        log.warning(
            "resolver.undeclared_dependency",
            package=package,
            hint="add it to 'requires' in package.yml",
        )
        reconciled[package] = None
        added.append(package)
    return reconciled, added
