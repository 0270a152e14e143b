"""Manifest loader — parse package.yml into a validated Manifest."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from debpack.exceptions import BadFieldShape, ManifestSyntaxError, MissingPackageName
from debpack.models.manifest import Manifest

log = structlog.get_logger("debpack.manifest")

MANIFEST_FILE = "package.yml"

# Plain scalars stay text: `libfoo: 1.10` is the constraint "1.10", not 1.1
_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class _ManifestLoader(yaml.SafeLoader):
    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


_EXPECTED_SHAPES = {
    "package": "a string",
    "description": "a string",
    "requires": "a mapping of package name to version constraint",
    "conflicts": "a mapping of package name to version constraint",
    "perl_ignore": "a list of module names",
}


def load_manifest(content: str) -> Manifest:
    """Parse manifest *content* and apply defaults.

    ``requires`` and ``conflicts`` default to empty mappings and
    ``perl_ignore`` to an empty list.

    Raises:
        ManifestSyntaxError: the document is not valid YAML.
        MissingPackageName: no non-empty ``package`` field.
        BadFieldShape: a known field has the wrong structure.
    """
    try:
        data = yaml.load(content, Loader=_ManifestLoader)
    except yaml.YAMLError as e:
        raise ManifestSyntaxError(f"Invalid YAML in manifest: {e}") from e

    if not isinstance(data, dict):
        raise MissingPackageName()
    package = data.get("package")
    if package is None or (isinstance(package, str) and not package.strip()):
        raise MissingPackageName()

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        field = str(e.errors()[0]["loc"][0])
        raise BadFieldShape(field, _EXPECTED_SHAPES.get(field, "well-formed")) from e

    log.debug(
        "manifest.loaded",
        package=manifest.package,
        requires=len(manifest.requires),
        conflicts=len(manifest.conflicts),
        ignored=len(manifest.perl_ignore),
    )
    return manifest


def read_manifest(path: Path) -> Manifest:
    return load_manifest(path.read_text(encoding="utf-8"))
