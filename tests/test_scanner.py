"""Tests for import extraction and source file discovery."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from debpack.scanner import (
    EXTRACTOR_REGISTRY,
    ModuleUsageScanner,
    get_extractor,
    iter_source_files,
    register_extractor,
)
from debpack.scanner.extractors.perl import PerlImportExtractor
from debpack.scanner.extractors.python import PythonImportExtractor

# ── Registry ─────────────────────────────────────────────────────────────


class TestRegistry:
    def test_builtin_extractors_registered(self):
        assert {"perl", "python"}.issubset(EXTRACTOR_REGISTRY)

    def test_default_is_perl(self):
        assert get_extractor().language == "perl"

    def test_unknown_language(self):
        with pytest.raises(ValueError, match="No import extractor for 'cobol'"):
            get_extractor("cobol")

    def test_register_custom_extractor(self):
        class ShellExtractor:
            language = "shell-test"
            library_suffixes = (".sh",)
            interpreter = "sh"

            def extract_imports(self, file_path, content):
                return {"coreutils"}

        register_extractor(ShellExtractor())
        try:
            assert get_extractor("shell-test").extract_imports(Path("x"), "") == {"coreutils"}
        finally:
            EXTRACTOR_REGISTRY.pop("shell-test")


# ── Perl extractor ───────────────────────────────────────────────────────


class TestPerlImportExtractor:
    def _extract(self, content: str) -> set[str]:
        return PerlImportExtractor().extract_imports(Path("Foo.pm"), content)

    def test_use_and_require(self):
        content = "use strict;\nuse warnings;\nuse JSON::XS qw(decode_json);\nrequire LWP::UserAgent;\n"
        assert self._extract(content) == {"strict", "warnings", "JSON::XS", "LWP::UserAgent"}

    def test_version_only_use_skipped(self):
        assert self._extract("use 5.010;\nuse v5.36;\nuse Moo;\n") == {"Moo"}

    def test_module_with_version(self):
        assert self._extract("use List::Util 1.45 qw(uniq);\n") == {"List::Util"}

    def test_dynamic_require_skipped(self):
        assert self._extract('require $class;\nrequire "config.pl";\n') == set()

    def test_pod_skipped(self):
        content = "use Carp;\n\n=head1 SYNOPSIS\n\n  use Not::Real;\n\n=cut\n\nuse Data::Dumper;\n"
        assert self._extract(content) == {"Carp", "Data::Dumper"}

    def test_end_section_skipped(self):
        assert self._extract("use Carp;\n__END__\nuse Not::Real;\n") == {"Carp"}

    def test_data_section_skipped(self):
        assert self._extract("use Carp;\n__DATA__\nuse Not::Real;\n") == {"Carp"}

    def test_comments_skipped(self):
        content = "# use Commented::Out;\nuse Carp; # use Also::Commented;\n"
        assert self._extract(content) == {"Carp"}

    def test_statements_after_semicolon_and_braces(self):
        content = "my $x = 1; use Foo::Bar;\nBEGIN { require Baz; }\n"
        assert self._extract(content) == {"Foo::Bar", "Baz"}

    def test_words_containing_use_ignored(self):
        assert self._extract("my $reuse = misuse Foo;\nprint 'use Nothing';\n") == set()

    def test_parent_classes(self):
        content = "use parent qw(Base::One Base::Two);\nuse base 'Base::Three';\n"
        assert self._extract(content) == {"parent", "base", "Base::One", "Base::Two", "Base::Three"}

    def test_parent_list_across_lines(self):
        content = "package Foo;\nuse parent qw(\n    Moo::Base\n    Other::Base\n);\n1;\n"
        assert self._extract(content) == {"parent", "Moo::Base", "Other::Base"}

    def test_quoted_parent_on_next_line(self):
        content = "package Foo;\nuse base\n  'Third::Base',\n  \"Fourth::Base\";\n1;\n"
        assert self._extract(content) == {"base", "Third::Base", "Fourth::Base"}

    def test_multiline_import_list_keeps_following_statements(self):
        content = "use POSIX qw(\n  floor\n  ceil\n);\nsub load { require Lazy::Mod }\nuse Carp;\n"
        assert self._extract(content) == {"POSIX", "Lazy::Mod", "Carp"}

    def test_parent_norequire(self):
        assert self._extract("use parent -norequire, 'Local::Class';\n") == {"parent"}

    def test_no_statement_ignored(self):
        assert self._extract("no warnings 'redefine';\n") == set()


# ── Python extractor ─────────────────────────────────────────────────────


class TestPythonImportExtractor:
    def _extract(self, content: str) -> set[str]:
        return PythonImportExtractor().extract_imports(Path("mod.py"), content)

    def test_imports(self):
        content = "import os\nimport yaml.constructor\nfrom requests import Session\n"
        assert self._extract(content) == {"os", "yaml", "requests"}

    def test_relative_imports_skipped(self):
        assert self._extract("from . import sibling\nfrom .pkg import x\n") == set()

    def test_syntax_error_yields_nothing(self):
        assert self._extract("def broken(:\n") == set()


# ── Source file discovery ────────────────────────────────────────────────


def _executable(path: Path) -> None:
    os.chmod(path, 0o755)


class TestIterSourceFiles:
    def test_bin_scripts_and_lib_modules(self, make_source_tree):
        root = make_source_tree(
            files={
                "bin/tool": "#!/usr/bin/perl\nuse Carp;\n",
                "bin/README": "plain text",
                "lib/Foo.pm": "package Foo;\n",
                "lib/Foo/Bar.pm": "package Foo::Bar;\n",
                "lib/Foo/notes.txt": "not perl",
            }
        )
        files = iter_source_files(root, frozenset({"bin", "lib"}), PerlImportExtractor())
        rel = [str(f.relative_to(root)) for f in files]
        assert sorted(rel) == ["bin/tool", "lib/Foo.pm", "lib/Foo/Bar.pm"]
        assert files == sorted(files)

    def test_executable_without_shebang_included(self, make_source_tree):
        root = make_source_tree(files={"bin/runner": "use Carp;\n"})
        _executable(root / "bin" / "runner")
        files = iter_source_files(root, frozenset({"bin"}), PerlImportExtractor())
        assert [f.name for f in files] == ["runner"]

    def test_vcs_metadata_skipped(self, make_source_tree):
        root = make_source_tree(
            files={"lib/.svn/text-base/Foo.pm": "use Bad;\n", "lib/Foo.pm": "package Foo;\n"}
        )
        files = iter_source_files(root, frozenset({"lib"}), PerlImportExtractor())
        assert [str(f.relative_to(root)) for f in files] == ["lib/Foo.pm"]

    def test_absent_roles_not_walked(self, make_source_tree):
        root = make_source_tree(files={"lib/Foo.pm": "package Foo;\n", "bin/tool": "#!/usr/bin/perl\n"})
        files = iter_source_files(root, frozenset({"lib"}), PerlImportExtractor())
        assert [f.name for f in files] == ["Foo.pm"]

    def test_etc_and_t_not_scanned(self, make_source_tree):
        root = make_source_tree(
            files={"etc/foo.conf": "use Nope;\n", "t/basic.t": "use Test::More;\n", "lib/Foo.pm": ""}
        )
        files = iter_source_files(root, frozenset({"etc", "t", "lib"}), PerlImportExtractor())
        assert [f.name for f in files] == ["Foo.pm"]


# ── Scanner ──────────────────────────────────────────────────────────────


class TestModuleUsageScanner:
    def test_union_of_imports(self, make_source_tree):
        root = make_source_tree(
            files={
                "bin/tool": "#!/usr/bin/perl\nuse strict;\nuse Foo;\nuse JSON::XS;\n",
                "lib/Foo.pm": "package Foo;\nuse strict;\nuse LWP::UserAgent;\n1;\n",
            }
        )
        modules = ModuleUsageScanner().scan(root, frozenset({"bin", "lib"}))
        assert modules == {"strict", "Foo", "JSON::XS", "LWP::UserAgent"}

    def test_empty_tree(self, make_source_tree):
        root = make_source_tree(dirs=("lib",))
        assert ModuleUsageScanner().scan(root, frozenset({"lib"})) == frozenset()

    def test_python_extractor(self, make_source_tree):
        root = make_source_tree(
            files={"lib/pkg/mod.py": "import yaml\n", "bin/run": "#!/usr/bin/env python3\nimport click\n"}
        )
        scanner = ModuleUsageScanner(get_extractor("python"))
        assert scanner.scan(root, frozenset({"bin", "lib"})) == {"yaml", "click"}
