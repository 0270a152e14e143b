"""Import extractors — auto-registered on import."""

from debpack.scanner.extractors import (
    perl,  # noqa: F401
    python,  # noqa: F401
)
