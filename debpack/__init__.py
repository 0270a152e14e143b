"""debpack: Debian packages from source trees, with dependencies inferred from imports."""

__version__ = "0.1.0"

from debpack.assembler import assemble_descriptor
from debpack.config import RunConfig
from debpack.generator import ControlFileGenerator
from debpack.layout import LayoutInspector
from debpack.manifest import load_manifest
from debpack.models import Manifest, PackageDescriptor, ResolutionResult, ResolvedDependency
from debpack.pipeline import PackagingPipeline, PipelineOutput
from debpack.resolver import DependencyResolver, reconcile
from debpack.scanner import ModuleUsageScanner
from debpack.version import parse_version

__all__ = [
    "ControlFileGenerator",
    "DependencyResolver",
    "LayoutInspector",
    "Manifest",
    "ModuleUsageScanner",
    "PackageDescriptor",
    "PackagingPipeline",
    "PipelineOutput",
    "ResolutionResult",
    "ResolvedDependency",
    "RunConfig",
    "assemble_descriptor",
    "load_manifest",
    "parse_version",
    "reconcile",
]
