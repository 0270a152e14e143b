"""Module usage scanner — find the modules a source tree imports."""

from debpack.scanner.registry import (
    EXTRACTOR_REGISTRY,
    ImportExtractor,
    get_extractor,
    register_extractor,
)
from debpack.scanner.scanner import ModuleUsageScanner, iter_source_files

__all__ = [
    "EXTRACTOR_REGISTRY",
    "ImportExtractor",
    "ModuleUsageScanner",
    "get_extractor",
    "iter_source_files",
    "register_extractor",
]
