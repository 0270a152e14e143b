"""Import extractor for Python scripts and modules."""

from __future__ import annotations

import ast
from pathlib import Path

import structlog

from debpack.scanner.registry import register_extractor

log = structlog.get_logger("debpack.scanner")


class PythonImportExtractor:
    language = "python"
    library_suffixes = (".py",)
    interpreter = "python"

    def extract_imports(self, file_path: Path, content: str) -> set[str]:
        try:
            tree = ast.parse(content, filename=str(file_path))
        except SyntaxError as e:
            log.warning("scanner.syntax_error", file=str(file_path), error=str(e))
            return set()

        modules: set[str] = set()
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                modules.update(alias.name.split(".")[0] for alias in node.names)
            elif isinstance(node, ast.ImportFrom):
                # Relative imports stay inside the package
                if node.level == 0 and node.module:
                    modules.add(node.module.split(".")[0])
        return modules


register_extractor(PythonImportExtractor())
