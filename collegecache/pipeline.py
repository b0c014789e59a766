"""Ingestion pipeline for a single state.

A run moves through these stages::

    FETCH_INDEX -> fresh?  -> stop
                -> stale?  -> STORE_INDEX
                           -> for each college: FETCH_DETAIL, EXTRACT, MERGE
                           -> UPDATE_FINGERPRINT

The partition is passed explicitly to every stage; a pipeline holds no
per-run state and can be reused for several partitions in turn.
"""

from __future__ import annotations

import logging

from collegecache.config import ScrapeSettings
from collegecache.data_types import Partition, PipelineOutcome, Response
from collegecache.fetcher import ResilientFetcher
from collegecache.logging_utils import (
    PartitionLoggerAdapter,
    configure_logging,
    partition_logger,
)
from collegecache.parsers import (
    fingerprint,
    parse_index,
    parse_universities,
)
from collegecache.request_manager import SyncRequestManager
from collegecache.storage import CacheStore

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Two-stage fetch (index, then per-college detail) into a CacheStore."""

    def __init__(
        self,
        settings: ScrapeSettings,
        store: CacheStore,
        fetcher: ResilientFetcher,
    ) -> None:
        self.settings = settings
        self.store = store
        self.fetcher = fetcher

    def run(self, partition: Partition) -> PipelineOutcome:
        """Bring the cache for ``partition`` up to date.

        Returns:
            ``PipelineOutcome.FRESH`` if the index body was unchanged,
            ``PipelineOutcome.UPDATED`` after a full re-enrichment.
        """
        log = partition_logger(__name__, partition)

        log.info("Loading index of colleges from AICTE...")
        response = self.fetch_index(partition)
        digest = fingerprint(response.content)

        self.store.ensure_exists(partition)
        if not self.store.is_stale(partition, digest):
            log.info("Cached data is up-to-date. Not modifying.")
            return PipelineOutcome.FRESH

        self.store_index(partition, response, log)
        self.enrich_records(partition, log)
        self.store.update_fingerprint(partition, digest)
        log.info("Done!")
        return PipelineOutcome.UPDATED

    def fetch_index(self, partition: Partition) -> Response:
        return self.fetcher.fetch(self.settings.index_url(partition))

    def store_index(
        self,
        partition: Partition,
        response: Response,
        log: PartitionLoggerAdapter,
    ) -> None:
        log.info("Cache expired. Storing index of colleges...")
        records = parse_index(response)
        self.store.replace_records(partition, records)

    def enrich_records(
        self, partition: Partition, log: PartitionLoggerAdapter
    ) -> None:
        """Fetch every college's detail page and merge its universities.

        Iterates over every id in the stored document, which includes ids
        left over from earlier runs that the latest index no longer lists.
        """
        record_ids = list(self.store.get_document(partition).records)
        total = len(record_ids)
        log.info(f"Adding university info for {total} colleges...")

        interval = self.settings.progress_interval
        for index, record_id in enumerate(record_ids, start=1):
            if index % interval == 0:
                log.info(
                    "Progress of adding university info: "
                    f"{index} / {total}"
                )
            universities = self.fetch_universities(record_id)
            self.store.merge_record(
                partition, record_id, {"universities": universities}
            )

    def fetch_universities(self, record_id: str) -> list[str]:
        response = self.fetcher.fetch(self.settings.detail_url(record_id))
        return parse_universities(response, self.settings.placeholder)


def run_partition(
    partition_name: str,
    settings: ScrapeSettings,
    log_level: int | None = None,
) -> PipelineOutcome:
    """Run the pipeline for one state with its own HTTP client.

    This is the unit of work handed to a worker process, so it takes only
    picklable arguments and builds everything else itself.

    Args:
        partition_name: State name; must already be validated.
        settings: Scrape settings shared by every worker.
        log_level: If given, configure logging first (for fresh worker
            processes that didn't inherit the parent's configuration).
    """
    if log_level is not None:
        configure_logging(log_level)
    partition = Partition(partition_name)
    with SyncRequestManager(timeout=settings.timeout) as request_manager:
        fetcher = ResilientFetcher(
            request_manager,
            retry_delay=settings.retry_delay,
            max_retries=settings.max_retries,
            log=partition_logger("collegecache.fetcher", partition),
        )
        pipeline = IngestionPipeline(
            settings, CacheStore(settings.output_dir), fetcher
        )
        return pipeline.run(partition)
