"""CSV encoding of report rows."""

import csv
from io import StringIO
from typing import Any, Iterable, Sequence

from conversion_report.models.record import RawRecord
from conversion_report.reports.base import Column


def _cell(value: Any, default: str) -> Any:
    if value is None:
        return default
    if isinstance(value, bool):
        return str(value).lower()
    return value


def project(record: RawRecord, columns: Sequence[Column]) -> dict[str, Any]:
    """Flatten a record to {label: value} using each column's dotted path."""
    return {col.label: _cell(record.get_path(col.path), col.default) for col in columns}


def encode_csv(records: Iterable[RawRecord], columns: Sequence[Column]) -> str:
    """Comma-separated text with a header row; standard CSV quoting, no trailing line break."""
    out = StringIO()
    writer = csv.DictWriter(
        out,
        fieldnames=[col.label for col in columns],
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writeheader()
    for record in records:
        writer.writerow(project(record, columns))
    text = out.getvalue()
    return text[:-1] if text.endswith("\n") else text
