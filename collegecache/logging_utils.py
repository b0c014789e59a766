"""Logging helpers.

Partitions run side by side and their output interleaves, so every line a
partition's run emits carries the partition's short tag::

    2025-01-03 10:00:00 INFO collegecache.pipeline: [ANDHRA-P     ] Done!
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from collegecache.data_types import Partition

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class PartitionLoggerAdapter(logging.LoggerAdapter):
    """Prefix every message with ``[<partition log tag>]``.

    The partition is also attached to each record as ``extra["partition"]``
    for handlers that want it.
    """

    def __init__(self, logger: logging.Logger, partition: Partition) -> None:
        super().__init__(logger, {"partition": partition.name})
        self.partition = partition

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs.setdefault("extra", {}).update(self.extra or {})
        return f"[{self.partition.log_tag}] {msg}", kwargs


def partition_logger(
    name: str, partition: Partition
) -> PartitionLoggerAdapter:
    """Return the module logger ``name`` tagged with ``partition``."""
    return PartitionLoggerAdapter(logging.getLogger(name), partition)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for the CLI and for worker processes."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("collegecache").setLevel(level)
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
