"""Exception types for collegecache.

Two families matter to the pipeline:

- ``TransientException`` and its subclasses describe failures that might
  resolve on retry (network errors, non-2xx responses, timeouts). The
  resilient fetcher swallows these and tries again.
- ``ScraperAssumptionException`` and its subclasses describe upstream data
  that no longer matches what the parsers expect. These are fatal for the
  affected partition.

Configuration and precondition errors are plain ``ValueError`` /
``LookupError`` subclasses so callers can catch them without importing
this module.

Partitions may run in worker processes, so every exception here must
survive pickling. Classes whose constructor takes more than a message
define ``__reduce__`` to rebuild themselves from their constructor
arguments.
"""

from typing import Any


class ScraperAssumptionException(Exception):
    """Base class for parser assumption violations.

    Parsers assume a particular JSON shape for the index listing and a
    particular table layout for detail pages. When these assumptions are
    violated, they raise a subclass of this exception with enough context
    to diagnose the change upstream.
    """

    def __init__(
        self,
        message: str,
        request_url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the assumption violation.
            request_url: The URL of the response that triggered this error.
            context: Optional dict of additional context (row index, counts, etc).
        """
        self.message = message
        self.request_url = request_url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        parts.append(f"URL: {self.request_url}")

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.message, self.request_url, self.context))


class HTMLStructuralAssumptionException(ScraperAssumptionException):
    """Raised when a detail page's HTML doesn't match expectations.

    Attributes:
        selector: The XPath selector that was used.
        description: What was being selected.
        expected_min: Minimum number of elements expected.
        actual_count: Actual number of elements found.
    """

    def __init__(
        self,
        selector: str,
        description: str,
        expected_min: int,
        actual_count: int,
        request_url: str,
    ) -> None:
        self.selector = selector
        self.description = description
        self.expected_min = expected_min
        self.actual_count = actual_count

        message = (
            f"HTML structure mismatch: Expected at least {expected_min} "
            f"elements for '{description}', but found {actual_count}"
        )
        context = {
            "selector": selector,
            "expected_min": expected_min,
            "actual_count": actual_count,
        }
        super().__init__(message, request_url, context)

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            type(self),
            (
                self.selector,
                self.description,
                self.expected_min,
                self.actual_count,
                self.request_url,
            ),
        )


class DataFormatAssumptionException(ScraperAssumptionException):
    """Raised when the index listing doesn't match the expected schema.

    Attributes:
        errors: List of error dicts, each with ``loc`` and ``msg`` keys.
        failed_doc: The value that failed validation.
    """

    def __init__(
        self,
        errors: list[dict[str, Any]],
        failed_doc: Any,
        request_url: str,
    ) -> None:
        self.errors = errors
        self.failed_doc = failed_doc

        error_summary = ", ".join(
            f"{err['loc'][0]}: {err['msg']}" for err in errors
        )
        message = f"Index listing validation failed: {error_summary}"

        context = {
            "error_count": len(errors),
            "errors": errors,
            "failed_doc": failed_doc,
        }
        super().__init__(message, request_url, context)

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            type(self),
            (self.errors, self.failed_doc, self.request_url),
        )


# =============================================================================
# Transient Exceptions
# =============================================================================


class TransientException(Exception):
    """Base class for transient errors that might resolve on retry.

    Transient exceptions represent temporary failures like network issues,
    unexpected status codes, or timeouts. The resilient fetcher is
    responsible for the retry policy.
    """

    pass


class HTMLResponseAssumptionException(TransientException):
    """Raised when an HTTP response has an unexpected status code.

    Attributes:
        status_code: The actual HTTP status code received.
        expected_codes: List of status codes that were expected.
        url: The URL that returned the unexpected status.
        message: Human-readable error message.
    """

    def __init__(
        self,
        status_code: int,
        expected_codes: list[int],
        url: str,
    ) -> None:
        self.status_code = status_code
        self.expected_codes = expected_codes
        self.url = url

        expected_str = ", ".join(str(code) for code in expected_codes)
        self.message = (
            f"HTTP {status_code} from {url} (expected one of: {expected_str})"
        )
        super().__init__(self.message)

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            type(self),
            (self.status_code, self.expected_codes, self.url),
        )


class RequestTimeoutException(TransientException):
    """Raised when a request times out.

    Attributes:
        url: The URL that timed out.
        timeout_seconds: The timeout duration in seconds.
        message: Human-readable error message.
    """

    def __init__(self, url: str, timeout_seconds: float | None) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.message = f"Request to {url} timed out after {timeout_seconds}s"
        super().__init__(self.message)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.url, self.timeout_seconds))


class ConnectionFailedException(TransientException):
    """Raised when the transport fails before a response is received.

    Wraps the underlying ``httpx`` error (connection refused, DNS failure,
    dropped connection, too many redirects).

    Attributes:
        url: The URL being fetched.
        error: The original transport exception.
    """

    def __init__(self, url: str, error: Exception) -> None:
        self.url = url
        self.error = error
        self.message = (
            f"Request to {url} failed: {type(error).__name__}: {error}"
        )
        super().__init__(self.message)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.url, self.error))


class RetriesExhaustedException(TransientException):
    """Raised when a configured retry ceiling is reached.

    Only possible when the fetcher was given ``max_retries``; the default
    policy retries forever.
    """

    def __init__(
        self, url: str, attempts: int, last_error: TransientException
    ) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        self.message = (
            f"Giving up on {url} after {attempts} attempts: {last_error}"
        )
        super().__init__(self.message)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.url, self.attempts, self.last_error))


# =============================================================================
# Configuration and precondition errors
# =============================================================================


class InvalidPartitionException(ValueError):
    """Raised when a caller selects a state that isn't in the known set."""

    def __init__(self, name: str, valid_names: list[str]) -> None:
        self.name = name
        self.valid_names = valid_names
        super().__init__(
            f"Invalid state {name!r}. Pick one of the following:\n"
            + ", ".join(valid_names)
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.name, self.valid_names))


class RecordNotIndexedException(LookupError):
    """Raised when a record is merged before the index stage stored it."""

    def __init__(self, partition: str, record_id: str) -> None:
        self.partition = partition
        self.record_id = record_id
        super().__init__(
            f"Record {record_id!r} is not in the cache for {partition}; "
            "the index must be stored before detail data is merged"
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.partition, self.record_id))
