"""CSV serialization of report rows for download."""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

import pandas as pd

from .errors import SchemaMismatch

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def check_columns(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """
    Return the column header taken from the first row.

    Raises SchemaMismatch if any row's key set differs from the first.
    """
    if not rows:
        return []
    header = list(rows[0].keys())
    expected = set(header)
    for index, row in enumerate(rows):
        if set(row.keys()) != expected:
            raise SchemaMismatch(index, header, list(row.keys()))
    return header


def rows_to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Serialize rows to CSV text.

    Fields containing a comma, quote or newline are wrapped in double
    quotes with inner quotes doubled; None becomes an empty field.
    No rows gives an empty string.
    """
    header = check_columns(rows)
    if not header:
        return ""
    df = pd.DataFrame(list(rows), columns=header, dtype=object)
    buf = io.StringIO()
    df.to_csv(
        buf,
        index=False,
        na_rep="",
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    return buf.getvalue()


def rows_to_csv_bytes(rows: Sequence[Mapping[str, Any]]) -> bytes:
    return rows_to_csv(rows).encode("utf-8")


def export_filename(report_name: str, fleet: str = "all", on: Optional[date] = None) -> str:
    """Suggested download name: {reportName}_{yyyy-MM-dd}_{fleet}.csv"""
    on = on or date.today()
    return f"{report_name}_{on.isoformat()}_{fleet}.csv"


@dataclass(frozen=True)
class CsvExport:
    """Finished payload handed to the download sink."""

    filename: str
    content: bytes

    media_type: str = CSV_MEDIA_TYPE


def build_export(
    rows: Sequence[Mapping[str, Any]],
    report_name: str,
    fleet: str = "all",
    on: Optional[date] = None,
) -> CsvExport:
    return CsvExport(
        filename=export_filename(report_name, fleet, on),
        content=rows_to_csv_bytes(rows),
    )
