"""Control file generator — the debian/ directory for a package."""

from debpack.generator.control import (
    ARTIFACTS,
    ControlFileGenerator,
    format_relation,
    format_relations,
)

__all__ = ["ARTIFACTS", "ControlFileGenerator", "format_relation", "format_relations"]
