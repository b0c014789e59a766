"""Request manager for issuing HTTP GET requests.

SyncRequestManager owns the ``httpx.Client`` and turns raw transport
behaviour into the exception vocabulary of ``collegecache.exceptions``:

- timeouts become ``RequestTimeoutException``
- any non-2xx status becomes ``HTMLResponseAssumptionException``
- every other ``httpx.HTTPError`` becomes ``ConnectionFailedException``

All three are transient. A malformed URL is not: ``httpx.InvalidURL`` and
``httpx.UnsupportedProtocol`` propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from collegecache.data_types import Response
from collegecache.exceptions import (
    ConnectionFailedException,
    HTMLResponseAssumptionException,
    RequestTimeoutException,
)

logger = logging.getLogger(__name__)


class SyncRequestManager:
    """Manages HTTP requests for a single worker.

    Example::

        with SyncRequestManager(timeout=60.0) as manager:
            response = manager.get("http://example.com/")
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
        """
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> SyncRequestManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get(self, url: str) -> Response:
        """Fetch ``url`` and return the Response.

        Raises:
            RequestTimeoutException: If the request times out.
            HTMLResponseAssumptionException: If the status is not 2xx.
            ConnectionFailedException: On any other transport failure.
        """
        try:
            http_response = self._client.get(url)
        except httpx.UnsupportedProtocol:
            raise
        except httpx.TimeoutException:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            )
        except httpx.HTTPError as e:
            raise ConnectionFailedException(url=url, error=e) from e

        if not http_response.is_success:
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=url,
            )

        logger.debug(
            f"GET {url} -> {http_response.status_code} "
            f"({len(http_response.content)} bytes)"
        )

        return Response(
            status_code=http_response.status_code,
            content=http_response.content,
            text=http_response.text,
            url=str(http_response.url),
        )
