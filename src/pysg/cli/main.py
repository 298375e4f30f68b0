"""pysg - structural grep for Python source."""

import sys
from typing import Any

import click

from pysg.config.loader import load_config
from pysg.core.console import pluralize, status
from pysg.core.errors import PysgError
from pysg.core.logging import configure_logging
from pysg.files.discovery import discover_files
from pysg.search.driver import SearchDriver, SearchOptions, SearchSummary


def _search_overrides(
    globs: tuple[str, ...],
    hidden: bool,
    no_ignore: bool,
    workers: int | None,
) -> dict[str, Any]:
    """Only options given on the command line override configured values."""
    overrides: dict[str, Any] = {}
    if globs:
        overrides["globs"] = list(globs)
    if hidden:
        overrides["hidden"] = True
    if no_ignore:
        overrides["respect_ignore"] = False
    if workers is not None:
        overrides["workers"] = workers
    return overrides


def _print_stats(summary: SearchSummary) -> None:
    status(
        f"{pluralize(summary.searched, 'file')} searched, "
        f"{summary.matched} matched, {summary.failed} failed, "
        f"{pluralize(summary.lines, 'line')} printed",
        style="error" if summary.failed else "success",
    )


@click.command()
@click.version_option(version="0.1.0", prog_name="pysg")
@click.argument("expr")
@click.argument("paths", nargs=-1, type=click.Path())
@click.option("-n", "--line-number", is_flag=True, help="Prefix each match with its line number")
@click.option(
    "-g",
    "--glob",
    "globs",
    multiple=True,
    metavar="PATTERN",
    help="File name glob for directory walks (repeatable, replaces the defaults)",
)
@click.option("--hidden", is_flag=True, help="Search hidden files and directories")
@click.option("--no-ignore", is_flag=True, help="Don't honour .gitignore/.ignore or default exclusions")
@click.option(
    "-j",
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Worker processes (default: number of CPUs)",
)
@click.option("--stats", is_flag=True, help="Print a summary to stderr when done")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    expr: str,
    paths: tuple[str, ...],
    line_number: bool,
    globs: tuple[str, ...],
    hidden: bool,
    no_ignore: bool,
    workers: int | None,
    stats: bool,
    verbose: bool,
) -> None:
    """Search Python source with an XPath expression over its syntax tree.

    EXPR is evaluated against the projection of every file. PATH may be
    files or directories; with no PATH, source is read from stdin.

    \b
    Examples:
        pysg '//FunctionDef/Identifier' src/
        pysg -n '//Call[Name/Identifier="print"]' app.py
        pysg 'count(//ClassDef)' < module.py
    """
    try:
        config = load_config(
            logging={"level": "DEBUG"} if verbose else None,
            search=_search_overrides(globs, hidden, no_ignore, workers) or None,
        )
        configure_logging(config=config.logging)

        driver = SearchDriver(
            SearchOptions(expression=expr, line_numbers=line_number),
            workers=config.search.workers,
            out=sys.stdout,
            log_config=config.logging,
        )
        if paths:
            files = discover_files(
                paths,
                globs=config.search.globs,
                respect_ignore=config.search.respect_ignore,
                hidden=config.search.hidden,
            )
            summary = driver.run_files(files)
        else:
            summary = driver.run_stream(click.get_binary_stream("stdin"))
    except PysgError as e:
        raise click.ClickException(e.message) from e

    if stats:
        _print_stats(summary)


if __name__ == "__main__":
    cli()
