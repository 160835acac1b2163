"""
Builds specification documents from comments embedded in source files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import scaffold
from .builder import build as build_specification
from .config import ConfigError, build_config
from .constants import DEFAULT_MANIFEST, OUTPUT_FORMATS
from .diagnostics import render_diagnostic
from .exceptions import SpanError, SpecError
from .extractor import extract_file
from .filesystem import get_max_file_size
from .watch import watch as watch_specification

__all__ = ["cli"]

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def _configure_logging(verbosity: int) -> None:
    level = _LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _spec_exception(error: SpecError) -> click.ClickException:
    if isinstance(error, SpanError):
        return click.ClickException(render_diagnostic(error))
    return click.ClickException(str(error))


def _load_config(search_path: Path, **overrides: object):
    try:
        config = build_config(search_path, **overrides)
        max_file_size = get_max_file_size(default=config.max_file_size)
    except (ConfigError, ValueError) as error:
        raise click.BadParameter(str(error)) from error
    config.max_file_size = max_file_size
    return config


@click.group()
@click.version_option()
@click.option("-v", "--verbose", count=True, help="Increase logging verbosity (-v, -vv).")
def cli(verbose: int):
    """
    Extract specification comments from source files and build a document.
    """
    _configure_logging(verbose)


@cli.command()
@click.option(
    "--specification-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST,
    show_default=True,
    help="Specification manifest",
)
@click.option("--output-file", type=click.Path(dir_okay=False, path_type=Path), help="Output file")
@click.option("--output-format", type=click.Choice(OUTPUT_FORMATS), help="Output format")
@click.option("--watch", is_flag=True, help="Rebuild whenever a specification file changes")
def build(
    specification_path: Path, output_file: Path | None, output_format: str | None, watch: bool
):
    """
    Build the specification described by a manifest.

    With --watch, keeps rebuilding on changes; build errors are printed
    and watching continues until interrupted.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the manifest, template or a section file is
            invalid, or the output cannot be written.

    Examples:
        specmark build --output-format html
    """
    config = _load_config(specification_path.resolve().parent, output_format=output_format)

    if watch:
        watch_specification(
            specification_path,
            output_file,
            config.output_format,
            config,
            report=lambda message: click.echo(message, err=True),
        )
        return

    try:
        build_specification(specification_path, output_file, config.output_format, config)
    except SpecError as error:
        raise _spec_exception(error) from error
    except IOError as error:
        raise click.ClickException(str(error)) from error

    click.echo(f"=> {config.output_format} output built from {specification_path}", err=True)


@cli.command()
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--indent-chars", help="Indentation emitted per extra marker character")
def extract(filepath: Path, indent_chars: str | None):
    """
    Print the specification text extracted from a single file.

    Examples:
        specmark extract src/overview.rs
    """
    config = _load_config(filepath.resolve().parent, indent_chars=indent_chars)

    try:
        content = extract_file(
            filepath, indent_chars=config.indent_chars, max_file_size=config.max_file_size
        )
    except SpecError as error:
        raise _spec_exception(error) from error

    click.echo(content, nl=False)


@cli.command()
@click.argument("name")
def new(name: str):
    """
    Create a new specification directory called NAME.
    """
    try:
        path = scaffold.new(name)
    except (SpecError, IOError) as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"created specification {name} in {path}")


@cli.command()
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), default=".")
@click.option("--name", help="Specification name (defaults to the directory name)")
def init(path: Path, name: str | None):
    """
    Initialize a specification in PATH (defaults to the current directory).
    """
    try:
        scaffold.init(path, name=name)
    except (SpecError, IOError) as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"initialized specification in {path.resolve()}")


if __name__ == "__main__":
    cli()
