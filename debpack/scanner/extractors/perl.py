"""Import extractor for Perl scripts and modules."""

from __future__ import annotations

import re
from pathlib import Path

from debpack.scanner.registry import register_extractor

_MODULE = r"[A-Za-z_]\w*(?:::\w+)*"

# `use Foo::Bar ...;` / `require Foo::Bar;`, at line start or after ; { }.
# Arguments run to the next `;`, possibly across lines, and are captured
# without being consumed.
_STATEMENT_RE = re.compile(
    rf"(?:^|[;{{}}])\s*(use|require)\s+({_MODULE})(?=([^;]*))", re.MULTILINE
)

_VERSION_ONLY_RE = re.compile(r"v[0-9]+")

# Parent class lists: qw(A B), 'A', "A"
_QW_RE = re.compile(r"qw\s*[(\[{/<]([^)\]}/>]*)[)\]}/>]")
_QUOTED_RE = re.compile(rf"""['"]({_MODULE})['"]""")

_INHERITANCE_PRAGMAS = {"parent", "base"}

_POD_START_RE = re.compile(r"^=[a-zA-Z]")


def _code_lines(content: str):
    """Yield lines of Perl code, skipping POD blocks and trailing data sections."""
    in_pod = False
    for line in content.splitlines():
        if in_pod:
            if line.startswith("=cut"):
                in_pod = False
            continue
        if _POD_START_RE.match(line):
            in_pod = True
            continue
        if line.strip() in ("__END__", "__DATA__"):
            return
        yield _strip_comment(line)


def _strip_comment(line: str) -> str:
    stripped = line.lstrip()
    if stripped.startswith("#"):
        return ""
    m = re.search(r"\s#", line)
    return line[: m.start()] if m else line


def _parent_classes(args: str) -> set[str]:
    if "-norequire" in args:
        return set()
    names: set[str] = set()
    for qw in _QW_RE.findall(args):
        names.update(w for w in qw.split() if re.fullmatch(_MODULE, w))
    names.update(_QUOTED_RE.findall(args))
    return names


class PerlImportExtractor:
    language = "perl"
    library_suffixes = (".pm",)
    interpreter = "perl"

    def extract_imports(self, file_path: Path, content: str) -> set[str]:
        modules: set[str] = set()
        code = "\n".join(_code_lines(content))
        for _keyword, module, args in _STATEMENT_RE.findall(code):
            if _VERSION_ONLY_RE.fullmatch(module):
                continue
            modules.add(module)
            if module in _INHERITANCE_PRAGMAS:
                modules.update(_parent_classes(args))
        return modules


register_extractor(PerlImportExtractor())
