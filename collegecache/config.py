"""Runtime settings for a scrape.

Settings are a frozen dataclass so they can be pickled into worker
processes unchanged. The CLI builds them from its options, each of which
can also come from a ``COLLEGECACHE_*`` environment variable.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from collegecache.constants import (
    DETAIL_URL_TEMPLATE,
    INDEX_URL_TEMPLATE,
    PROGRESS_INTERVAL,
    RETRY_DELAY,
    UNIVERSITY_PLACEHOLDER,
)
from collegecache.data_types import Partition

DEFAULT_OUTPUT_DIR = Path("output")


@dataclass(frozen=True)
class ScrapeSettings:
    """Everything a worker needs to run one partition.

    Attributes:
        output_dir: Directory holding one cache document per state.
        index_url_template: Index URL with a ``{state}`` placeholder.
        detail_url_template: Detail URL with a ``{record_id}`` placeholder.
        retry_delay: Seconds to wait before retrying a failed request.
        max_retries: Retry ceiling per request; None retries forever.
        timeout: HTTP timeout in seconds; None disables it.
        progress_interval: Detail pages between progress log lines.
        placeholder: University value meaning "no university".
    """

    output_dir: Path = DEFAULT_OUTPUT_DIR
    index_url_template: str = INDEX_URL_TEMPLATE
    detail_url_template: str = DETAIL_URL_TEMPLATE
    retry_delay: float = RETRY_DELAY
    max_retries: int | None = None
    timeout: float | None = 60.0
    progress_interval: int = PROGRESS_INTERVAL
    placeholder: str = UNIVERSITY_PLACEHOLDER

    def __post_init__(self) -> None:
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if self.progress_interval < 1:
            raise ValueError("progress_interval must be >= 1")

    def index_url(self, partition: Partition) -> str:
        return self.index_url_template.format(
            state=quote(partition.name, safe="")
        )

    def detail_url(self, record_id: str) -> str:
        return self.detail_url_template.format(
            record_id=quote(record_id, safe="")
        )
