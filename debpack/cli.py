"""CLI entry point: debpack.

Subcommands:
    debpack build [--local PATH | --git URL | --svn URL]   # source tree -> .deb
    debpack inspect PATH                                   # print resolved metadata
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import click
from dotenv import load_dotenv

from debpack.config import SOURCE_GIT, SOURCE_LOCAL, SOURCE_SVN, RunConfig
from debpack.core.logging import setup_logging
from debpack.exceptions import DebpackError
from debpack.generator import ControlFileGenerator
from debpack.models.package import ResolutionResult
from debpack.pipeline import PackagingPipeline
from debpack.scanner import EXTRACTOR_REGISTRY

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _select_source(local: str | None, git: str | None, svn: str | None) -> tuple[str, str]:
    """Pick the source acquisition mode; more than one selection is an error."""
    chosen = [
        (mode, value)
        for mode, value in ((SOURCE_LOCAL, local), (SOURCE_GIT, git), (SOURCE_SVN, svn))
        if value
    ]
    if len(chosen) > 1:
        raise click.UsageError("--local, --git and --svn are mutually exclusive")
    return chosen[0] if chosen else (SOURCE_LOCAL, ".")


def _echo_summary(pipeline: PackagingPipeline) -> None:
    click.echo("\nPipeline summary:", err=True)
    for line in pipeline.progress.format_summary():
        click.echo(f"  {line}", err=True)


def _resolution_lines(resolution: ResolutionResult) -> list[str]:
    """One line per imported module: where it comes from."""
    lines = []
    for record in resolution.records:
        if record.is_core_runtime:
            origin = "(core)"
        elif record.is_self_provided:
            origin = "(this package)"
        else:
            origin = record.providing_package
        lines.append(f"  {record.symbol_name} -> {origin}")
    lines.extend(f"  {module} -> (ignored)" for module in resolution.ignored)
    return lines


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """debpack: build Debian packages from source trees."""
    load_dotenv()
    setup_logging(verbose)


@main.command("build", context_settings=CONTEXT_SETTINGS)
@click.option("--local", "local", default=None, metavar="PATH", help="Package a local working copy (default: .)")
@click.option("--git", "git", default=None, metavar="URL", help="Clone a git repository and package it")
@click.option("--svn", "svn", default=None, metavar="URL", help="Check out a subversion repository and package it")
@click.option("-r", "--revision", default=None, help="Branch, tag, commit or svn revision to check out")
@click.option("-o", "--output-dir", default=".", type=click.Path(file_okay=False), help="Where to put the built package")
@click.option("--strict/--no-strict", default=False, help="Fail on dependencies missing from 'requires'")
@click.option("--test/--no-test", "run_tests", default=True, help="Run the package's test suite first")
@click.option("--cleanup/--keep", default=True, help="Remove the temporary build tree afterwards")
@click.option("--build/--no-build", "build", default=True, help="Run dpkg-buildpackage, or only write debian/ into the output dir")
@click.option(
    "--extractor",
    default="perl",
    type=click.Choice(sorted(EXTRACTOR_REGISTRY)),
    help="Source language used to find imports",
)
def build(
    local: str | None,
    git: str | None,
    svn: str | None,
    revision: str | None,
    output_dir: str,
    strict: bool,
    run_tests: bool,
    cleanup: bool,
    build: bool,
    extractor: str,
) -> None:
    """Build a Debian package from a source tree."""
    mode, source = _select_source(local, git, svn)
    config = RunConfig.from_env(
        source_mode=mode,
        source=source,
        revision=revision,
        output_dir=Path(output_dir),
        strict=strict,
        run_tests=run_tests,
        cleanup=cleanup,
        build=build,
        language=extractor,
    )

    pipeline = PackagingPipeline(config)
    try:
        result = pipeline.run()
    except DebpackError as e:
        _echo_summary(pipeline)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_summary(pipeline)
    descriptor = result.descriptor
    click.echo(f"Package: {descriptor.name} {descriptor.version}")
    for name in result.added_dependencies:
        click.echo(f"  added undeclared dependency: {name}")
    if result.artifacts:
        for artifact in result.artifacts:
            click.echo(f"  {artifact}")
    else:
        click.echo(f"  debian/ written to {result.debian_dir}")


@main.command("inspect", context_settings=CONTEXT_SETTINGS)
@click.argument("source_dir", default=".", type=click.Path(exists=True, file_okay=False))
@click.option("--strict/--no-strict", default=False, help="Fail on dependencies missing from 'requires'")
@click.option(
    "--extractor",
    default="perl",
    type=click.Choice(sorted(EXTRACTOR_REGISTRY)),
    help="Source language used to find imports",
)
def inspect(source_dir: str, strict: bool, extractor: str) -> None:
    """Resolve a source tree and print the control file it would get."""
    config = RunConfig.from_env(strict=strict, language=extractor, source=source_dir)
    pipeline = PackagingPipeline(config)
    try:
        descriptor, added = pipeline.prepare(Path(source_dir))
    except DebpackError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    generator = ControlFileGenerator(config.maintainer_name, config.maintainer_email)
    click.echo(f"Layout: {', '.join(sorted(descriptor.layout))}")
    click.echo(f"Version: {descriptor.version}")
    for name in added:
        click.echo(f"Undeclared: {name}")
    if pipeline.resolution is not None:
        click.echo("Modules:")
        for line in _resolution_lines(pipeline.resolution):
            click.echo(line)
    click.echo()
    click.echo(generator.render_control(descriptor), nl=False)
    click.echo()
    click.echo(generator.render_changelog(descriptor, datetime.now(timezone.utc)), nl=False)


if __name__ == "__main__":
    main()
