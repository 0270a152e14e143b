"""Packaging pipeline — source tree in, debian/ directory and .deb out."""

from __future__ import annotations

import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import structlog

from debpack.assembler import assemble_descriptor
from debpack.config import RunConfig
from debpack.generator import ControlFileGenerator
from debpack.layout import CHANGES_FILE, LayoutInspector
from debpack.manifest import MANIFEST_FILE, read_manifest
from debpack.models.package import ROLE_TESTS, PackageDescriptor, ResolutionResult
from debpack.progress import ProgressTracker
from debpack.resolver import DependencyResolver, DpkgOwnerQuery, create_locator, reconcile
from debpack.resolver.locator import ModuleLocator
from debpack.resolver.ownership import PackageOwnerQuery
from debpack.scanner import ModuleUsageScanner, get_extractor
from debpack.source import SourceTree, acquire_source
from debpack.toolchain import build_package, run_test_suite
from debpack.version import apply_dirty_suffix, read_version

log = structlog.get_logger("debpack.pipeline")


@dataclass
class PipelineOutput:
    """Pipeline return value."""

    descriptor: PackageDescriptor
    debian_dir: Path
    added_dependencies: list[str] = field(default_factory=list)
    artifacts: list[Path] = field(default_factory=list)


class PackagingPipeline:
    """
    Run the packaging pipeline for one RunConfig.

    Phase 1: acquire source (checkout or local working copy)
    Phase 2: layout inspection
    Phase 3: manifest + version
    Phase 4: module usage scan
    Phase 5: dependency resolution + reconciliation
    Phase 6: descriptor assembly
    Phase 7: test suite (optional)
    Phase 8: control file generation
    Phase 9: dpkg-buildpackage (optional)

    Every phase runs to completion before the next one starts; the first
    error stops the run.
    """

    def __init__(
        self,
        config: RunConfig,
        owner_query: PackageOwnerQuery | None = None,
        locator_factory: Callable[[Path], ModuleLocator] | None = None,
        source_provider: Callable[[RunConfig, Path], SourceTree] = acquire_source,
        test_runner: Callable[[Path, str], None] = run_test_suite,
        builder: Callable[[Path, str, str], list[Path]] = build_package,
    ) -> None:
        self.config = config
        self.owner_query = owner_query or DpkgOwnerQuery()
        self.locator_factory = locator_factory or (
            lambda source_dir: create_locator(config.language, source_dir)
        )
        self.source_provider = source_provider
        self.test_runner = test_runner
        self.builder = builder
        self.progress = ProgressTracker()
        self.resolution: ResolutionResult | None = None

    def prepare(
        self,
        source_dir: Path,
        origin_url: str | None = None,
        dirty: bool = False,
    ) -> tuple[PackageDescriptor, list[str]]:
        """Inspect *source_dir* and return the resolved descriptor.

        Also returns the packages added to ``requires`` because the source
        imports them without declaring them. The per-module resolution is
        kept on :attr:`resolution`.
        """
        source_dir = Path(source_dir)
        progress = self.progress

        with progress.phase("layout") as p:
            layout = LayoutInspector().inspect(source_dir)
            p.detail = ", ".join(sorted(layout))

        with progress.phase("manifest") as p:
            manifest = read_manifest(source_dir / MANIFEST_FILE)
            version = apply_dirty_suffix(read_version(source_dir / CHANGES_FILE), dirty)
            p.detail = f"{manifest.package} {version}"

        with progress.phase("scan") as p:
            scanner = ModuleUsageScanner(get_extractor(self.config.language))
            modules = scanner.scan(source_dir, layout)
            p.detail = f"{len(modules)} modules"

        with progress.phase("resolve") as p:
            resolver = DependencyResolver(self.locator_factory(source_dir), self.owner_query)
            result = resolver.resolve(modules, manifest.perl_ignore, source_dir, layout)
            self.resolution = result
            requires, added = reconcile(manifest.requires, result.packages, self.config.strict)
            p.detail = f"{len(result.packages)} packages, {len(added)} undeclared"

        with progress.phase("assemble"):
            descriptor = assemble_descriptor(
                manifest, version, layout, origin_url=origin_url, requires=requires
            )

        return descriptor, added

    def run(self) -> PipelineOutput:
        config = self.config
        progress = self.progress
        workdir = Path(tempfile.mkdtemp(prefix="debpack-"))
        log.debug("pipeline.workdir", path=str(workdir))

        structlog.contextvars.bind_contextvars(source=config.source)
        try:
            with progress.phase("acquire") as p:
                tree = self.source_provider(config, workdir)
                p.detail = tree.origin_url or str(tree.path)

            descriptor, added = self.prepare(tree.path, tree.origin_url, tree.dirty)
            structlog.contextvars.bind_contextvars(package=descriptor.name)

            if not config.run_tests:
                progress.skip("test", "disabled")
            elif not descriptor.has_role(ROLE_TESTS):
                progress.skip("test", "no t/ directory")
            else:
                with progress.phase("test"):
                    self.test_runner(tree.path, config.language)

            staging_root = workdir if config.build else config.output_dir
            build_dir = staging_root / f"{descriptor.name}-{descriptor.version}"
            with progress.phase("generate") as p:
                generator = ControlFileGenerator(config.maintainer_name, config.maintainer_email)
                timestamp = config.timestamp or datetime.now(timezone.utc)
                debian_dir = generator.write(descriptor, tree.path, build_dir, timestamp)
                p.detail = str(debian_dir)

            artifacts: list[Path] = []
            if not config.build:
                progress.skip("build", "disabled")
            else:
                with progress.phase("build") as p:
                    built = self.builder(build_dir, descriptor.name, descriptor.version)
                    config.output_dir.mkdir(parents=True, exist_ok=True)
                    for artifact in built:
                        target = config.output_dir / artifact.name
                        shutil.copy2(artifact, target)
                        artifacts.append(target)
                    p.detail = f"{len(artifacts)} artifacts"

            return PipelineOutput(
                descriptor=descriptor,
                debian_dir=debian_dir,
                added_dependencies=added,
                artifacts=artifacts,
            )
        finally:
            if config.cleanup:
                shutil.rmtree(workdir, ignore_errors=True)
            else:
                log.info("pipeline.workdir_kept", path=str(workdir))
            structlog.contextvars.unbind_contextvars("source", "package")
