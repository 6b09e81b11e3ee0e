"""
CLI entry point: ties together parser → resolver → reporter.

Usage:
  # Check one workflow file:
  gha-updater .github/workflows/ci.yml

  # Check every workflow in a directory:
  gha-updater .github/workflows/

  # Output as JSON:
  gha-updater --format json .github/workflows/*.yml

  # Same thing without installing the console script:
  python3 -m gha_updater .github/workflows/ci.yml

Exit codes:
  0: scan finished (per-file errors are reported inline)
  2: usage error (no workflow files given, unknown option)
"""

import fnmatch
import logging
import os

import click

from gha_updater.config import load_config
from gha_updater.parser import find_workflow_files
from gha_updater.reporter import report_console, report_json
from gha_updater.resolver import ActionsUpdater, GitTagLister

logger = logging.getLogger(__name__)

EXIT_OK = 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _expand_paths(paths: tuple[str, ...], exclude: list[str]) -> list[str]:
    """Replace directories by their workflow files and drop excluded files."""
    files = []
    for path in paths:
        if os.path.isdir(path):
            files.extend(find_workflow_files(path))
        else:
            files.append(path)

    if exclude:
        before = len(files)
        files = [
            f for f in files
            if not any(fnmatch.fnmatch(f, pat) for pat in exclude)
        ]
        excluded = before - len(files)
        if excluded:
            logger.info("Excluded %d workflow(s) via config", excluded)
    return files


@click.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option("--format", "output_format", type=click.Choice(["console", "json"]), default="console", help="Output format.")
@click.option("--config", "config_path", default=None, help="Path to .gha-updater.yml config file.")
@click.option("--host", default=None, help="Host the action repositories are listed from (overrides config file).")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for each tag listing (overrides config file).")
def cli(paths: tuple[str, ...], verbose: bool, output_format: str, config_path: str, host: str, timeout: float):
    """Report GitHub Actions pinned to a tag older than the latest upstream tag.

    PATHS are workflow files or directories of workflow files.
    """
    _setup_logging(verbose)

    # Load config file (CLI flags override config values)
    config = load_config(config_path=config_path, scan_path=paths[0])
    lister = GitTagLister(
        host=host or config.host,
        timeout=timeout if timeout is not None else config.timeout,
    )
    # One updater for the whole run so each repository is listed once
    updater = ActionsUpdater(lister, ignore=config.ignore)

    files = _expand_paths(paths, config.exclude)
    if not files:
        click.echo("No workflow files found.")
        return

    results = []
    for file_path in files:
        result = updater.scan_file(file_path)
        if output_format == "console":
            click.echo(report_console(result))
        results.append(result)

    if output_format == "json":
        click.echo(report_json(results))

    logger.info(
        "Scanned %d file(s), %d remote lookup(s), %d failure(s)",
        len(results), updater.lookups, sum(1 for r in results if not r.ok),
    )


if __name__ == "__main__":
    cli()
