"""Durable per-state cache documents.

CacheStore is the only writer of cache files. Every operation re-reads the
document from disk, applies its change and writes the whole document back;
nothing is cached in memory between calls. Workers own disjoint states, so
files never see two writers at once.

Write ordering gives crash safety: ``update_fingerprint`` is always the last
write of a run, so a run that dies part-way leaves the previous fingerprint
in place and the next run redoes everything.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from collegecache.data_types import Partition
from collegecache.exceptions import RecordNotIndexedException
from collegecache.models import CollegeRecord, PartitionDocument

logger = logging.getLogger(__name__)


class CacheStore:
    """Read-modify-write access to one JSON document per state.

    Documents live at ``<root>/<partition.cache_key>.json``.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, partition: Partition) -> Path:
        return self.root / f"{partition.cache_key}.json"

    # -- persistence primitives -------------------------------------------

    def load(self, partition: Partition) -> PartitionDocument:
        """Read the whole document, or an empty one if it doesn't exist."""
        path = self.path_for(partition)
        if not path.exists():
            return PartitionDocument(partition=partition.name)
        return PartitionDocument.model_validate_json(
            path.read_text(encoding="utf-8")
        )

    def save(self, partition: Partition, document: PartitionDocument) -> None:
        """Overwrite the whole document.

        The JSON is written to a sibling temp file and renamed into place so
        readers never see a half-written document.
        """
        path = self.path_for(partition)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.tmp")
        tmp_path.write_text(
            document.model_dump_json(indent=2), encoding="utf-8"
        )
        os.replace(tmp_path, path)

    # -- operations ----------------------------------------------------------

    def exists(self, partition: Partition) -> bool:
        return self.path_for(partition).exists()

    def ensure_exists(self, partition: Partition) -> None:
        """Create an empty document for ``partition`` if there is none."""
        if self.exists(partition):
            return
        logger.debug(f"Creating empty cache at {self.path_for(partition)}")
        self.save(partition, PartitionDocument(partition=partition.name))

    def is_stale(self, partition: Partition, fingerprint: str) -> bool:
        """Whether the stored fingerprint is absent or differs."""
        if not self.exists(partition):
            return True
        return self.load(partition).fingerprint != fingerprint

    def get_document(self, partition: Partition) -> PartitionDocument:
        return self.load(partition)

    def replace_records(
        self, partition: Partition, records: Mapping[str, CollegeRecord]
    ) -> None:
        """Store a fresh index listing. Fingerprint is left untouched.

        Every listed record replaces its stored entry. Records the listing
        no longer mentions are kept as they are.
        """
        document = self.load(partition)
        document.records.update(records)
        self.save(partition, document)

    def merge_record(
        self,
        partition: Partition,
        record_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        """Upsert ``fields`` into an existing record.

        Raises:
            RecordNotIndexedException: If ``record_id`` was not stored by
                ``replace_records`` first.
            ValueError: If ``fields`` names an unknown field or has the
                wrong type.
        """
        document = self.load(partition)
        existing = document.records.get(record_id)
        if existing is None:
            raise RecordNotIndexedException(partition.name, record_id)

        try:
            merged = CollegeRecord.model_validate(
                {**existing.model_dump(), **fields}
            )
        except ValidationError as e:
            raise ValueError(
                f"Invalid fields for record {record_id!r}: {e}"
            ) from e

        if merged == existing:
            return
        document.records[record_id] = merged
        self.save(partition, document)

    def update_fingerprint(
        self,
        partition: Partition,
        fingerprint: str,
        updated_at: datetime | None = None,
    ) -> None:
        """Record ``fingerprint`` and a fresh timestamp. Call this last."""
        document = self.load(partition)
        document.fingerprint = fingerprint
        document.updated_at = updated_at or datetime.now(timezone.utc)
        self.save(partition, document)

    def list_documents(self) -> list[PartitionDocument]:
        """Every cached document under the root, sorted by file name."""
        if not self.root.is_dir():
            return []
        return [
            PartitionDocument.model_validate_json(
                path.read_text(encoding="utf-8")
            )
            for path in sorted(self.root.glob("*.json"))
        ]
