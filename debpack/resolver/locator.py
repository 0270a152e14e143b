"""Module locators — find the file that implements an imported module."""

from __future__ import annotations

import importlib.machinery
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from debpack.exceptions import ToolError

log = structlog.get_logger("debpack.resolver")


@dataclass(frozen=True)
class ModuleLocation:
    """Where a module was found and whether it ships with the language runtime."""

    path: Path
    is_core: bool = False


@runtime_checkable
class ModuleLocator(Protocol):
    def locate(self, module: str) -> ModuleLocation | None: ...


def _is_under(path: Path, roots: list[Path]) -> bool:
    for root in roots:
        try:
            path.relative_to(root)
            return True
        except ValueError:
            continue
    return False


class PerlModuleLocator:
    """Search the package's own lib/ and then the interpreter's @INC.

    A module is core when its file lives under ``privlibexp`` or
    ``archlibexp`` from ``Config.pm``. Both lists are queried from the
    interpreter once and reused for the rest of the run.
    """

    def __init__(
        self,
        source_dir: str | Path,
        perl: str = "perl",
        inc_dirs: list[str] | None = None,
        core_dirs: list[str] | None = None,
    ) -> None:
        self.source_lib = Path(source_dir).resolve() / "lib"
        self.perl = perl
        self._inc_dirs = [Path(d) for d in inc_dirs] if inc_dirs is not None else None
        self._core_dirs = [Path(d) for d in core_dirs] if core_dirs is not None else None

    def _query(self, code: str) -> list[str]:
        try:
            result = subprocess.run(
                [self.perl, "-MConfig", "-e", code],
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ToolError(f"Perl interpreter not found: {self.perl}") from e
        except subprocess.CalledProcessError as e:
            raise ToolError(f"Perl interpreter query failed: {e.stderr.strip()}") from e
        return [line for line in result.stdout.splitlines() if line.strip()]

    @property
    def inc_dirs(self) -> list[Path]:
        if self._inc_dirs is None:
            raw = self._query('print join("\\n", @INC)')
            self._inc_dirs = [Path(d) for d in raw if d != "."]
            log.debug("resolver.perl_inc", dirs=[str(d) for d in self._inc_dirs])
        return self._inc_dirs

    @property
    def core_dirs(self) -> list[Path]:
        if self._core_dirs is None:
            raw = self._query(
                'print join("\\n", grep { defined && length } @Config{qw(privlibexp archlibexp)})'
            )
            self._core_dirs = [Path(d) for d in raw]
        return self._core_dirs

    def locate(self, module: str) -> ModuleLocation | None:
        relative = Path(*module.split("::")).with_suffix(".pm")
        for directory in [self.source_lib, *self.inc_dirs]:
            candidate = directory / relative
            if candidate.is_file():
                return ModuleLocation(path=candidate, is_core=_is_under(candidate, self.core_dirs))
        return None


class PythonModuleLocator:
    """Search the package's own lib/ and then the current interpreter's path."""

    def __init__(self, source_dir: str | Path, search_path: list[str] | None = None) -> None:
        self.source_lib = Path(source_dir).resolve() / "lib"
        self.search_path = search_path if search_path is not None else list(sys.path)

    def locate(self, module: str) -> ModuleLocation | None:
        if module in sys.builtin_module_names:
            return ModuleLocation(path=Path(sys.executable), is_core=True)

        spec = importlib.machinery.PathFinder.find_spec(
            module, [str(self.source_lib), *self.search_path]
        )
        if spec is None:
            return None

        is_core = module in getattr(sys, "stdlib_module_names", ())
        if spec.origin and spec.origin not in ("built-in", "frozen"):
            return ModuleLocation(path=Path(spec.origin), is_core=is_core)
        # Namespace package: no single origin file
        if spec.submodule_search_locations:
            return ModuleLocation(path=Path(list(spec.submodule_search_locations)[0]), is_core=is_core)
        return ModuleLocation(path=Path(sys.executable), is_core=True)


def create_locator(language: str, source_dir: str | Path) -> ModuleLocator:
    if language == "perl":
        return PerlModuleLocator(source_dir)
    if language == "python":
        return PythonModuleLocator(source_dir)
    raise ValueError(f"No module locator for '{language}'")
