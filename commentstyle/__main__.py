"""Command line entry point for commentstyle."""
import difflib
import io
import logging
import os
import sys
from typing import Iterator, List, Optional

import click
import structlog
from structlog.stdlib import LoggerFactory

from commentstyle.config import Config, find_config, load_config, parse_style
from commentstyle.fixer import fix_text
from commentstyle.model import CommentStyleError, ConfigError, Diagnostic, Style, StyleOptions
from commentstyle.rules import check_text

LOGGER = structlog.get_logger(__name__)

IGNORED_PATHS = [".git", "node_modules"]

EXIT_CLEAN = 0
EXIT_PROBLEMS = 1
EXIT_ERROR = 2


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        format="[%(asctime)s - %(name)s - %(levelname)s] %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
    )
    structlog.configure(logger_factory=LoggerFactory())


def _resolve_config(config_path: Optional[str], style: Optional[str],
                    check_jsdoc: Optional[bool]) -> Config:
    if config_path is None:
        config_path = find_config(os.getcwd())
    config = load_config(config_path) if config_path else Config()

    options = config.options
    if style is not None or check_jsdoc is not None:
        new_style = parse_style(style) if style is not None else options.style
        new_check_jsdoc = check_jsdoc if check_jsdoc is not None else options.check_jsdoc
        # A style given on the command line does not inherit checkJSDoc from another style.
        if style is not None and check_jsdoc is None and new_style != options.style:
            new_check_jsdoc = False
        if new_check_jsdoc and new_style != Style.SEPARATE_LINES:
            raise ConfigError("--check-jsdoc is only valid with the separate-lines style")
        config.options = StyleOptions(new_style, new_check_jsdoc, options.ignore_pattern)
    return config


def iterate_files(paths: List[str], config: Config) -> Iterator[str]:
    """Yield files named on the command line and lintable files under named directories."""
    for path in paths:
        if not os.path.isdir(path):
            yield path
            continue
        for base, dirs, files in os.walk(path):
            dirs[:] = sorted(d for d in dirs if d not in IGNORED_PATHS)
            for file_name in sorted(files):
                if config.wants_file(file_name):
                    yield os.path.join(base, file_name)


def _read(file_name: str) -> str:
    with io.open(file_name, encoding="utf-8", newline="") as fh:
        return fh.read()


def format_diagnostic(file_name: str, diagnostic: Diagnostic) -> str:
    # Columns are reported 1-based like line numbers.
    suffix = " (fixable)" if diagnostic.fixable else ""
    return "Error: %s:%d:%d - %s - %s%s" % (file_name, diagnostic.start.line,
                                            diagnostic.start.column + 1, diagnostic.kind.value,
                                            diagnostic.message, suffix)


def lint_file(file_name: str, options: StyleOptions) -> int:
    """Lint one file and print its diagnostics, returning the number found."""
    diagnostics = check_text(_read(file_name), options)
    for diagnostic in diagnostics:
        click.echo(format_diagnostic(file_name, diagnostic))
    return len(diagnostics)


def fix_file(file_name: str, options: StyleOptions, dry_run: bool) -> int:
    """Fix one file in place, returning the number of problems left."""
    original = _read(file_name)
    result = fix_text(original, options)

    if result.output != original:
        if dry_run:
            diff = difflib.unified_diff(
                original.splitlines(keepends=True), result.output.splitlines(keepends=True),
                fromfile=file_name, tofile=file_name)
            click.echo("".join(diff), nl=False)
        else:
            with io.open(file_name, "w", encoding="utf-8", newline="") as fh:
                fh.write(result.output)
            LOGGER.info("Fixed file", file=file_name, fixed=len(result.applied))

    for diagnostic in result.remaining:
        click.echo(format_diagnostic(file_name, diagnostic))
    return len(result.remaining)


def _run(paths: List[str], config: Config, action) -> int:
    ret = EXIT_CLEAN
    for file_name in iterate_files(paths, config):
        try:
            if action(file_name):
                ret = max(ret, EXIT_PROBLEMS)
        except (CommentStyleError, OSError, UnicodeDecodeError) as err:
            LOGGER.error("Could not check file", file=file_name, error=str(err))
            click.echo(f'Exception while checking file "{file_name}": {err}', err=True)
            ret = EXIT_ERROR
    return ret


def _common_options(func):
    func = click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")(func)
    func = click.option("--config", "config_path", type=click.Path(dir_okay=False),
                        help="Path to a config file; defaults to the nearest .commentstyle.yml.")(func)
    func = click.option("--check-jsdoc/--no-check-jsdoc", default=None,
                        help="With separate-lines, also convert JSDoc comments.")(func)
    func = click.option("--style", type=click.Choice([s.value for s in Style]),
                        help="Comment style to enforce.")(func)
    func = click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))(func)
    return func


@click.group()
def main():
    """Enforce a single style for multiline comments in C-family source files."""


@main.command()
@_common_options
def lint(paths, style, check_jsdoc, config_path, verbose):
    """Report multiline comments that do not match the configured style."""
    configure_logging(verbose)
    try:
        config = _resolve_config(config_path, style, check_jsdoc)
    except CommentStyleError as err:
        raise click.UsageError(str(err))

    options = config.options
    sys.exit(_run(list(paths), config, lambda file_name: lint_file(file_name, options)))


@main.command()
@click.option("--dry-run", is_flag=True, help="Print a diff instead of writing files.")
@_common_options
def fix(paths, style, check_jsdoc, config_path, verbose, dry_run):
    """Rewrite multiline comments to match the configured style."""
    configure_logging(verbose)
    try:
        config = _resolve_config(config_path, style, check_jsdoc)
    except CommentStyleError as err:
        raise click.UsageError(str(err))

    options = config.options
    sys.exit(_run(list(paths), config, lambda file_name: fix_file(file_name, options, dry_run)))


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
