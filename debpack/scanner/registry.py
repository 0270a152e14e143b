"""Import extractor registry — one extractor per source language."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ImportExtractor(Protocol):
    """Interface that every import extractor must satisfy."""

    language: str
    library_suffixes: tuple[str, ...]  # e.g. (".pm",)
    interpreter: str  # matched against "#!" lines of scripts under bin/

    def extract_imports(self, file_path: Path, content: str) -> set[str]: ...


EXTRACTOR_REGISTRY: dict[str, ImportExtractor] = {}

DEFAULT_LANGUAGE = "perl"


def register_extractor(extractor: ImportExtractor) -> None:
    """Register an extractor instance by its language."""
    EXTRACTOR_REGISTRY[extractor.language] = extractor


def get_extractor(language: str = DEFAULT_LANGUAGE) -> ImportExtractor:
    try:
        return EXTRACTOR_REGISTRY[language]
    except KeyError:
        known = ", ".join(sorted(EXTRACTOR_REGISTRY)) or "none"
        raise ValueError(f"No import extractor for '{language}' (known: {known})") from None
