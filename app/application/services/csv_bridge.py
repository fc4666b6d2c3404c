"""CSV bridge: export a snapshot to CSV text and parse CSV text for import.

Columns are ``id`` followed by the schema's field names in display order.
Parsing only splits and checks shape; coercion and validation of each row
happen in the mutation coordinator.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from app.application.dtos.mutation import RowSkipped
from app.application.services.coercion import display_value
from app.domain.entities.document import CollectionDocument
from app.domain.entities.schema import CollectionSchema
from app.domain.exceptions import HeaderMismatchException
from app.shared.utils.datetime import utc_now

ID_COLUMN = "id"
_NEEDS_QUOTING = (",", '"', "\r", "\n")


@dataclass(frozen=True)
class CsvRow:
    """One data row whose column count matches the header."""

    line: int
    values: dict[str, str]

    @property
    def document_id(self) -> str:
        return self.values.get(ID_COLUMN, "").strip()


@dataclass(frozen=True)
class ParsedCsv:
    rows: tuple[CsvRow, ...]
    skipped: tuple[RowSkipped, ...]


def expected_header(schema: CollectionSchema) -> list[str]:
    return [ID_COLUMN, *schema.field_names]


def _quote(text: str) -> str:
    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def export_csv(documents: Sequence[CollectionDocument], schema: CollectionSchema) -> str:
    """Render documents as CSV, header first, rows joined by ``\\n``."""
    header = expected_header(schema)
    lines = [",".join(_quote(name) for name in header)]
    for document in documents:
        values = [document.id] + [
            display_value(document.get(name)) for name in schema.field_names
        ]
        lines.append(",".join(_quote(v) for v in values))
    return "\n".join(lines)


def export_filename(collection: str, day: date | None = None) -> str:
    """``{collection}_{YYYY-MM-DD}.csv`` for ``day`` (default: today, UTC)."""
    day = day or utc_now().date()
    return f"{collection}_{day.isoformat()}.csv"


def parse_csv(text: str, schema: CollectionSchema) -> ParsedCsv:
    """Split CSV text into rows keyed by column name.

    Records the csv module cannot read are reported as skipped rows.

    Raises:
        HeaderMismatchException: The file is empty or its trimmed header is
            not exactly ``id`` plus the schema field names in order.
    """
    # No cell can be longer than the whole text.
    if len(text) > csv.field_size_limit():
        csv.field_size_limit(len(text))
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff"), newline=""))
    expected = expected_header(schema)

    header: list[str] | None = None
    try:
        while (record := next(reader, None)) is not None:
            if record:
                header = [cell.strip() for cell in record]
                break
    except csv.Error:
        header = None
    if header is None or header != expected:
        raise HeaderMismatchException(expected, header or [])

    rows: list[CsvRow] = []
    skipped: list[RowSkipped] = []
    start = reader.line_num + 1
    while True:
        try:
            record = next(reader, None)
        except csv.Error as e:
            skipped.append(RowSkipped(line=start, reason=f"Malformed CSV record: {e}"))
            start = reader.line_num + 1
            continue
        if record is None:
            break
        line, start = start, reader.line_num + 1
        if not record or record == [""]:
            continue
        if len(record) != len(expected):
            skipped.append(
                RowSkipped(
                    line=line,
                    reason=f"Expected {len(expected)} columns, got {len(record)}",
                )
            )
            continue
        rows.append(CsvRow(line=line, values=dict(zip(expected, record))))
    return ParsedCsv(rows=tuple(rows), skipped=tuple(skipped))
