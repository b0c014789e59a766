"""Data types passed between the orchestrator, pipeline and fetcher.

The persisted document types live in ``collegecache.models``; this module
holds the in-flight values that never touch disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from collegecache.constants import STATES


class PipelineOutcome(Enum):
    """Result of running the ingestion pipeline for one partition.

    Values:
        FRESH: The index body was unchanged; nothing was fetched or written.
        UPDATED: The index changed and every record was re-enriched.
        FAILED: The partition's run raised a fatal error.
    """

    FRESH = "fresh"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True)
class Partition:
    """One state, processed independently end-to-end.

    A Partition is an immutable value handed to a worker for the whole of
    its run. It is never mutated or shared between workers.

    Attributes:
        name: The state name exactly as the dashboard spells it.
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Partition name must not be empty")

    @property
    def cache_key(self) -> str:
        """Storage key: lower-case words joined by underscores.

        >>> Partition("Andhra Pradesh").cache_key
        'andhra_pradesh'
        """
        return "_".join(word.lower() for word in self.name.split())

    @property
    def log_tag(self) -> str:
        """Short fixed-width tag for interleaved log output.

        The first word is kept whole, later words are reduced to initials.

        >>> Partition("Andaman and Nicobar Islands").log_tag
        'ANDAMAN-A-N-I'
        """
        words = self.name.split()
        if len(words) > 1:
            initials = "-".join(word[0] for word in words[1:])
            tag = f"{words[0]}-{initials}".upper()
        else:
            tag = self.name.upper()
        return tag.ljust(13)

    @classmethod
    def all(cls) -> list[Partition]:
        """Every known state, in dashboard order."""
        return [cls(name) for name in STATES]


@dataclass
class Response:
    """HTTP response from fetching a page.

    Modeled after httpx.Response to provide a familiar interface.

    Attributes:
        status_code: HTTP status code (200, 404, etc.).
        content: Raw response bytes.
        text: Decoded response text.
        url: Final URL after any redirects.
    """

    status_code: int
    content: bytes
    text: str
    url: str
