"""
Command-line interface for projsearch.

Commands:
    content: ripgrep content search under a root
    files: file name / path search, fuzzy over git tracked files by default

Example Usage:
    $ projsearch content TODO --root . --exclude .searchignore
    $ projsearch files button --root . --mode name --top 20
    $ projsearch files srcmain --no-git --mode path --format json
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from rich.console import Console

from ..core.api import ProjectSearch
from ..core.config import SearchConfig
from ..core.types import OutputFormat
from ..utils.error_handling import SearchError
from ..utils.formatter import format_result, render_matches_console
from ..utils.logging_config import LogFormat, LogLevel, configure_logging


def _logging_options(func):
    func = click.option("--debug", is_flag=True, default=False, help="Enable debug logging")(func)
    func = click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
        default="WARNING",
        help="Log level",
    )(func)
    func = click.option("--log-file", help="Log file path")(func)
    func = click.option(
        "--log-format",
        type=click.Choice([e.value for e in LogFormat]),
        default="simple",
        help="Log format",
    )(func)
    return func


def _configure_logging(debug: bool, log_level: str, log_file: str | None, log_format: str) -> None:
    if debug:
        log_level = "DEBUG"
    configure_logging(
        level=LogLevel(log_level),
        format_type=LogFormat(log_format),
        log_file=Path(log_file) if log_file else None,
        enable_file=bool(log_file),
        enable_console=True,
    )


@click.group()
@click.version_option(package_name="projsearch")
def cli() -> None:
    """projsearch - incremental project search backed by ripgrep and git"""
    pass


@cli.command("content")
@click.argument("query")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Search root")
@click.option("--exclude", "excludes", multiple=True, help="Ignore file passed to ripgrep")
@click.option("--case-sensitive", is_flag=True, default=False, help="Match case exactly")
@click.option("--rg", "rg_path", default="rg", help="ripgrep executable")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([e.value for e in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.option("--show-errors", is_flag=True, default=False, help="Print an error report")
@_logging_options
def content_cmd(
    query: str,
    root: str,
    excludes: tuple[str, ...],
    case_sensitive: bool,
    rg_path: str,
    fmt: str,
    show_errors: bool,
    debug: bool,
    log_level: str,
    log_file: str | None,
    log_format: str,
) -> None:
    _configure_logging(debug, log_level, log_file, log_format)
    engine = ProjectSearch(SearchConfig(ripgrep_path=rg_path))
    root_path = str(Path(root).resolve())

    matches = asyncio.run(
        engine.search_content(
            query, root_path, exclude_paths=excludes, case_sensitive=case_sensitive
        )
    )

    if OutputFormat(fmt) == OutputFormat.TEXT and sys.stdout.isatty():
        render_matches_console(matches, Console())
    elif matches or OutputFormat(fmt) == OutputFormat.JSON:
        click.echo(format_result(matches, OutputFormat(fmt)))

    if show_errors or engine.errors.has_errors():
        click.echo(engine.error_report(), err=True)
    if engine.errors.has_errors():
        sys.exit(1)


@cli.command("files")
@click.argument("query")
@click.option("--root", default=".", type=click.Path(file_okay=False), help="Search root")
@click.option(
    "--mode",
    type=click.Choice(["name", "path"]),
    default="name",
    help="Match against the file name or the whole relative path",
)
@click.option("--git/--no-git", "use_git", default=True, help="Fuzzy search over git tracked files")
@click.option("--top", "top_results", type=int, default=50, help="Maximum number of results")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([e.value for e in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@_logging_options
def files_cmd(
    query: str,
    root: str,
    mode: str,
    use_git: bool,
    top_results: int,
    fmt: str,
    debug: bool,
    log_level: str,
    log_file: str | None,
    log_format: str,
) -> None:
    _configure_logging(debug, log_level, log_file, log_format)
    if top_results <= 0:
        click.echo("Error: --top must be positive", err=True)
        sys.exit(1)

    engine = ProjectSearch()
    root_path = str(Path(root).resolve())
    search = {
        ("name", True): engine.search_files_name_git,
        ("path", True): engine.search_files_path_git,
        ("name", False): engine.search_files_name,
        ("path", False): engine.search_files_path,
    }[(mode, use_git)]

    try:
        paths = asyncio.run(search(query, root_path, top_results))
    except SearchError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    output = format_result(paths, OutputFormat(fmt))
    if output:
        click.echo(output)


def main() -> None:
    cli(prog_name="projsearch")


if __name__ == "__main__":
    main()
