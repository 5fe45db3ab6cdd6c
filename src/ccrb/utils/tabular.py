"""CSV and JSON serialization of flat records."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable, Mapping, Sequence


def parse_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text with a header row into one mapping per row."""

    if text.startswith("\ufeff"):
        text = text[1:]
    return [dict(row) for row in csv.DictReader(io.StringIO(text, newline=""))]


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _ordered_columns(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def format_csv(rows: Iterable[Mapping[str, Any]], columns: Sequence[str] | None = None) -> str:
    """Render rows with a header line; every column is kept, empty when missing."""

    materialized = list(rows)
    header = list(columns) if columns is not None else _ordered_columns(materialized)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if header:
        writer.writerow(header)
    for row in materialized:
        writer.writerow([_csv_cell(row.get(column)) for column in header])
    return buffer.getvalue()


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
