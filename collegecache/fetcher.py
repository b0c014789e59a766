"""Resilient fetcher: retry a GET until it succeeds.

On any transient failure, log it, wait a fixed delay and issue the same
request again. There is no backoff and, by default, no ceiling. A
persistently failing upstream stalls the owning worker rather than failing
the run. Pass ``max_retries`` to bound it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from collegecache.constants import RETRY_DELAY
from collegecache.data_types import Response
from collegecache.exceptions import (
    RetriesExhaustedException,
    TransientException,
)
from collegecache.request_manager import SyncRequestManager

logger = logging.getLogger(__name__)


class ResilientFetcher:
    """Wrap a request manager with wait-and-retry on transient errors.

    Example::

        fetcher = ResilientFetcher(manager, log=partition_logger(...))
        response = fetcher.fetch(url)
    """

    def __init__(
        self,
        request_manager: SyncRequestManager,
        retry_delay: float = RETRY_DELAY,
        max_retries: int | None = None,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the fetcher.

        Args:
            request_manager: Performs the actual HTTP request.
            retry_delay: Seconds to wait between attempts.
            max_retries: Retries allowed after the first attempt. None
                retries forever.
            log: Logger for retry messages, usually partition-tagged.
            sleep: Called with ``retry_delay`` between attempts.
        """
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be None or >= 0")
        self.request_manager = request_manager
        self.retry_delay = retry_delay
        self.max_retries = max_retries
        self.log = log or logger
        self.sleep = sleep

    def fetch(self, url: str) -> Response:
        """GET ``url``, retrying transient failures.

        Raises:
            RetriesExhaustedException: Only when ``max_retries`` is set and
                every attempt failed.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return self.request_manager.get(url)
            except TransientException as e:
                self.log.warning(f"{type(e).__name__}: {e}")
                if (
                    self.max_retries is not None
                    and attempt > self.max_retries
                ):
                    raise RetriesExhaustedException(url, attempt, e) from e
                self.log.warning(
                    "Encountered an issue while attempting to load URL. "
                    f"Sleeping for {self.retry_delay:g} seconds before "
                    "retrying..."
                )
                self.sleep(self.retry_delay)
