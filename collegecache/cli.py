"""collegecache CLI: scrape the AICTE dashboard and inspect the cache.

Usage:
    collegecache scrape                         # Every state, one at a time
    collegecache scrape --state "Tamil Nadu"    # A single state
    collegecache scrape --processes 4           # Four states at once
    collegecache states                         # List valid state names
    collegecache count                          # Colleges cached per state
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from typing_extensions import assert_never

from collegecache.config import DEFAULT_OUTPUT_DIR, ScrapeSettings
from collegecache.constants import (
    DETAIL_URL_TEMPLATE,
    INDEX_URL_TEMPLATE,
    RETRY_DELAY,
    STATES,
)
from collegecache.data_types import PipelineOutcome
from collegecache.exceptions import InvalidPartitionException
from collegecache.logging_utils import configure_logging
from collegecache.orchestrator import resolve_partitions, scrape as run_scrape
from collegecache.storage import CacheStore

_output_dir_option = click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    envvar="COLLEGECACHE_OUTPUT_DIR",
    help="Directory holding one cache document per state.",
)


@click.group()
@click.version_option(package_name="collegecache")
def cli() -> None:
    """collegecache: incremental AICTE college scraper."""


@cli.command()
@click.option("-s", "--state", default=None, help="Choose state.")
@click.option(
    "-p",
    "--processes",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of processes to run simultaneously.",
)
@_output_dir_option
@click.option(
    "--retry-delay",
    type=click.FloatRange(min=0),
    default=RETRY_DELAY,
    show_default=True,
    envvar="COLLEGECACHE_RETRY_DELAY",
    help="Seconds to wait before retrying a failed request.",
)
@click.option(
    "--max-retries",
    type=click.IntRange(min=0),
    default=None,
    envvar="COLLEGECACHE_MAX_RETRIES",
    help="Give up on a request after this many retries (default: never).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=60.0,
    show_default=True,
    envvar="COLLEGECACHE_TIMEOUT",
    help="HTTP timeout in seconds.",
)
@click.option(
    "--index-url-template",
    default=INDEX_URL_TEMPLATE,
    envvar="COLLEGECACHE_INDEX_URL",
    help="Index listing URL with a {state} placeholder.",
)
@click.option(
    "--detail-url-template",
    default=DETAIL_URL_TEMPLATE,
    envvar="COLLEGECACHE_DETAIL_URL",
    help="Course-details URL with a {record_id} placeholder.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def scrape(
    state: str | None,
    processes: int,
    output_dir: Path,
    retry_delay: float,
    max_retries: int | None,
    timeout: float,
    index_url_template: str,
    detail_url_template: str,
    verbose: bool,
) -> None:
    """Scrape one or every state into the cache.

    \b
    Examples:
        collegecache scrape
        collegecache scrape -s "Andhra Pradesh"
        collegecache scrape -p 4 --output-dir data
    """
    try:
        partitions = resolve_partitions(state)
    except InvalidPartitionException as e:
        raise click.BadParameter(str(e), param_hint="'--state'") from e

    configure_logging(logging.DEBUG if verbose else logging.INFO)

    settings = ScrapeSettings(
        output_dir=output_dir,
        retry_delay=retry_delay,
        max_retries=max_retries,
        timeout=timeout,
        index_url_template=index_url_template,
        detail_url_template=detail_url_template,
    )
    click.echo(f"States:    {len(partitions)}")
    click.echo(f"Processes: {processes}")
    click.echo(f"Output:    {output_dir}")

    outcomes = run_scrape(settings, state=state, processes=processes)

    failed = []
    for name, outcome in outcomes.items():
        match outcome:
            case PipelineOutcome.FRESH:
                label = "up-to-date"
            case PipelineOutcome.UPDATED:
                label = "updated"
            case PipelineOutcome.FAILED:
                label = "FAILED"
                failed.append(name)
            case _:
                assert_never(outcome)
        click.echo(f"{name}: {label}")

    if failed:
        raise click.ClickException(
            f"{len(failed)} state(s) failed: {', '.join(failed)}"
        )
    click.echo("Done.")


@cli.command()
def states() -> None:
    """List the valid state names."""
    for name in STATES:
        click.echo(name)


@cli.command()
@_output_dir_option
def count(output_dir: Path) -> None:
    """Count the colleges cached for each state."""
    total = 0
    for document in CacheStore(output_dir).list_documents():
        college_count = len(document.records)
        click.echo(f"{document.partition}: {college_count}")
        total += college_count
    click.echo(f"Total number of colleges: {total}")


if __name__ == "__main__":
    cli()
