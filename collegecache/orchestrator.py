"""Fan partitions out across a bounded pool of worker processes.

With one process (the default) partitions run one after another in the
calling process. With more, each partition becomes one task in a
``ProcessPoolExecutor``; the pool never holds two tasks for the same
partition, so each cache document has a single writer.

A fatal error in one partition is logged and recorded as
``PipelineOutcome.FAILED``; it does not stop its siblings.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ProcessPoolExecutor, as_completed

from collegecache.config import ScrapeSettings
from collegecache.constants import STATES
from collegecache.data_types import Partition, PipelineOutcome
from collegecache.exceptions import InvalidPartitionException
from collegecache.logging_utils import partition_logger
from collegecache.pipeline import run_partition

logger = logging.getLogger(__name__)


def resolve_partitions(state: str | None = None) -> list[Partition]:
    """Return the partitions to scrape.

    Args:
        state: A single state name, or None for every state.

    Raises:
        InvalidPartitionException: If ``state`` is not a known state.
    """
    if not state:
        return Partition.all()
    if state not in STATES:
        raise InvalidPartitionException(state, list(STATES))
    return [Partition(state)]


def _log_failure(partition: Partition, error: BaseException) -> None:
    partition_logger(__name__, partition).error(
        f"Failed with {type(error).__name__}: {error}",
        exc_info=error,
    )


def scrape(
    settings: ScrapeSettings,
    state: str | None = None,
    processes: int = 1,
) -> dict[str, PipelineOutcome]:
    """Run the ingestion pipeline for the selected partitions.

    Args:
        settings: Scrape settings passed to every worker.
        state: Restrict the run to this state. None runs every state.
        processes: Maximum number of partitions running at once.

    Returns:
        Outcome per state name, in the order the partitions were resolved.

    Raises:
        InvalidPartitionException: Before any network activity, if
            ``state`` is unknown.
    """
    partitions = resolve_partitions(state)
    outcomes: dict[str, PipelineOutcome] = {}

    if processes <= 1:
        for partition in partitions:
            try:
                outcomes[partition.name] = run_partition(
                    partition.name, settings
                )
            except Exception as e:
                _log_failure(partition, e)
                outcomes[partition.name] = PipelineOutcome.FAILED
        return outcomes

    workers = min(processes, len(partitions))
    log_level = logging.getLogger("collegecache").getEffectiveLevel()
    logger.info(
        f"Scraping {len(partitions)} states with {workers} processes"
    )
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures: dict[Future[PipelineOutcome], Partition] = {
            pool.submit(
                run_partition, partition.name, settings, log_level
            ): partition
            for partition in partitions
        }
        for future in as_completed(futures):
            partition = futures[future]
            try:
                outcomes[partition.name] = future.result()
            except Exception as e:
                _log_failure(partition, e)
                outcomes[partition.name] = PipelineOutcome.FAILED

    return {p.name: outcomes[p.name] for p in partitions}
