"""Pydantic models for the per-state cache document.

The document is written as indented JSON, one file per state, so it stays
readable and diffable by hand.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CollegeRecord(BaseModel):
    """One approved college.

    The four text fields come from the index listing; ``universities`` is
    filled in later from the college's course-details page. Every field is
    optional because the detail stage merges into an entry field by field.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    address: str | None = None
    district: str | None = None
    institution_type: str | None = None
    universities: list[str] | None = None


class PartitionDocument(BaseModel):
    """The durable cache for a single state.

    Attributes:
        partition: State name the document belongs to.
        fingerprint: Hex MD5 of the last index body whose run completed.
            ``None`` until the first run finishes.
        updated_at: When ``fingerprint`` was last written.
        records: College records keyed by AICTE id.
    """

    partition: str
    fingerprint: str | None = None
    updated_at: datetime | None = None
    records: dict[str, CollegeRecord] = Field(default_factory=dict)
