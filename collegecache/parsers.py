"""Parsers for the index listing and the course-details pages.

The index endpoint returns a JSON array of rows::

    [["1-123", "COLLEGE NAME", "ADDRESS", "DISTRICT", "TYPE", ...], ...]

Detail pages are HTML; each ``tbody`` row lists one course and names the
affiliating university in its second cell.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from lxml import html
from lxml.etree import ParserError

from collegecache.data_types import Response
from collegecache.exceptions import (
    DataFormatAssumptionException,
    HTMLStructuralAssumptionException,
)
from collegecache.models import CollegeRecord
from collegecache.text import normalize, normalize_all

INDEX_ROW_FIELDS = ("name", "address", "district", "institution_type")

DETAIL_ROWS_XPATH = "//tbody/tr"


def fingerprint(content: bytes) -> str:
    """MD5 hex digest of a raw response body.

    Used only to detect that the body changed; any byte difference counts.
    """
    return hashlib.md5(content).hexdigest()


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_index(response: Response) -> dict[str, CollegeRecord]:
    """Parse the index listing into normalized records keyed by AICTE id.

    Raises:
        DataFormatAssumptionException: If the body isn't a JSON array of
            rows with at least an id and the four text fields.
    """
    try:
        rows = json.loads(response.content)
    except json.JSONDecodeError as e:
        raise DataFormatAssumptionException(
            errors=[{"loc": ("body",), "msg": f"invalid JSON: {e}"}],
            failed_doc=response.text[:200],
            request_url=response.url,
        ) from e

    if not isinstance(rows, list):
        raise DataFormatAssumptionException(
            errors=[{"loc": ("body",), "msg": "expected a JSON array"}],
            failed_doc=rows,
            request_url=response.url,
        )

    records: dict[str, CollegeRecord] = {}
    min_length = 1 + len(INDEX_ROW_FIELDS)
    for index, row in enumerate(rows):
        if not isinstance(row, list) or len(row) < min_length:
            raise DataFormatAssumptionException(
                errors=[
                    {
                        "loc": (index,),
                        "msg": (
                            "expected an array of at least "
                            f"{min_length} fields"
                        ),
                    }
                ],
                failed_doc=row,
                request_url=response.url,
            )
        if row[0] is None:
            raise DataFormatAssumptionException(
                errors=[{"loc": (index,), "msg": "missing AICTE id"}],
                failed_doc=row,
                request_url=response.url,
            )
        record_id = str(row[0])
        records[record_id] = CollegeRecord(
            **{
                field: normalize(_text_or_none(value))
                for field, value in zip(INDEX_ROW_FIELDS, row[1:])
            }
        )
    return records


def parse_universities(response: Response, placeholder: str) -> list[str]:
    """Extract the distinct universities named on a course-details page.

    A page without course rows yields an empty list, as does a page whose
    only university is ``placeholder``.

    Raises:
        HTMLStructuralAssumptionException: If the body is not parseable
            HTML, or a course row has fewer than two cells.
    """
    if not response.content.strip():
        return []
    try:
        tree = html.fromstring(response.content)
    except ParserError as e:
        raise HTMLStructuralAssumptionException(
            selector="/html",
            description=f"course-details document ({e})",
            expected_min=1,
            actual_count=0,
            request_url=response.url,
        ) from e

    names: list[str] = []
    for row in tree.xpath(DETAIL_ROWS_XPATH):
        cells = row.xpath("./td")
        if len(cells) < 2:
            raise HTMLStructuralAssumptionException(
                selector=f"{DETAIL_ROWS_XPATH}/td",
                description="course row cells",
                expected_min=2,
                actual_count=len(cells),
                request_url=response.url,
            )
        names.append(cells[1].text_content())
    return normalize_all(names, placeholder=placeholder)
