"""Custom exceptions for debpack."""


class DebpackError(Exception):
    """Base exception for all packaging errors."""


class MalformedVersion(DebpackError):
    """Raised when the changes record does not start with a dotted-numeric version."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Malformed version line {line!r}: expected dotted numbers like '1.2.3'")


class MissingManifest(DebpackError):
    """Raised when the source tree has no manifest file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Manifest not found: {path}")


class MissingChangelog(DebpackError):
    """Raised when the source tree has no changes record."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Changes file not found: {path}")


class EmptyPackageLayout(DebpackError):
    """Raised when none of the installable content directories exist."""

    def __init__(self, source_dir: str, expected: list[str]):
        self.source_dir = source_dir
        self.expected = expected
        super().__init__(
            f"Nothing to package in {source_dir}: expected at least one of {expected}"
        )


class ManifestSyntaxError(DebpackError):
    """Raised when the manifest is not parseable YAML."""


class MissingPackageName(DebpackError):
    """Raised when the manifest has no usable 'package' field."""

    def __init__(self) -> None:
        super().__init__("Manifest is missing a non-empty 'package' field")


class BadFieldShape(DebpackError):
    """Raised when a manifest or descriptor field has the wrong structure."""

    def __init__(self, field: str, expected: str):
        self.field = field
        self.expected = expected
        super().__init__(f"Field '{field}' must be {expected}")


class UnresolvableModule(DebpackError):
    """Raised when an imported module cannot be found on any include path."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"Cannot locate module '{module}' (add it to perl_ignore to skip it)")


class UnresolvablePackage(DebpackError):
    """Raised when no single system package owns a module's file."""

    def __init__(self, module: str, path: str):
        self.module = module
        self.path = path
        super().__init__(f"No unique package owns {path} (providing module '{module}')")


class UndeclaredDependency(DebpackError):
    """Raised in strict mode when a discovered package is missing from 'requires'."""

    def __init__(self, package: str):
        self.package = package
        super().__init__(
            f"Package '{package}' is required by the source but not declared in 'requires'"
        )


class SourceError(DebpackError):
    """Raised when the source tree cannot be acquired."""


class AmbiguousSource(SourceError):
    """Raised when several VCS origins are detectable and none was selected."""

    def __init__(self, path: str, kinds: list[str]):
        self.path = path
        self.kinds = kinds
        super().__init__(
            f"{path} is a working copy of several VCS ({', '.join(kinds)}); "
            "select one explicitly with --git or --svn"
        )


class ToolError(DebpackError):
    """Raised when an external helper program is missing or fails."""


class TestSuiteFailed(ToolError):
    """Raised when the package's own test suite fails."""

    __test__ = False


class BuildError(ToolError):
    """Raised when the native packaging toolchain fails."""
