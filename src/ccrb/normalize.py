"""Canonicalization and deterministic ordering of harvested records.

Every run is a full refetch, so output is only diffable when the same upstream
data always serializes to the same bytes. Nothing here depends on the order
rows arrived in.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from .models import Allegation, ClosingReport, CombinedRecord, DepartureLetter, Officer

T = TypeVar("T")

CANONICAL_CASING: tuple[str, ...] = ("Gun pointed", "No penalty")

ALLEGATION_SORT_FIELDS: tuple[str, ...] = (
    "complaint_id",
    "officer_id",
    "fado_type",
    "allegation",
    "board_disposition",
    "nypd_disposition",
    "penalty_desc",
)

RAW_SNAPSHOT_SORT_FIELDS: tuple[str, ...] = (
    "Allegation Record Identity",
    "Complaint Id",
    "Tax ID",
    "Complaint Officer Number",
)

SortKey = tuple[tuple[int, str], ...]


def canonical_case(value: str | None) -> str | None:
    """Replace known inconsistently-cased values with their canonical spelling."""

    if value is None:
        return None
    folded = value.lower()
    for canonical in CANONICAL_CASING:
        if folded == canonical.lower():
            return canonical
    return value


def strip_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Drop null and empty-string fields for JSON output."""

    return {key: value for key, value in record.items() if value is not None and value != ""}


def strip_volatile(rows: Iterable[Mapping[str, Any]], fields: Sequence[str]) -> list[dict[str, Any]]:
    """Remove fields that change every run without reflecting a real update."""

    dropped = set(fields)
    return [{key: value for key, value in row.items() if key not in dropped} for row in rows]


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def field_sort_key(item: Any, fields: Sequence[str]) -> SortKey:
    """Compare each field as a string; absent values sort before any defined value."""

    key = []
    for name in fields:
        value = _field(item, name)
        key.append((0, "") if value is None else (1, str(value)))
    return tuple(key)


def sort_by_fields(items: Iterable[T], fields: Sequence[str]) -> list[T]:
    return sorted(items, key=lambda item: field_sort_key(item, fields))


def sort_officers(officers: Iterable[Officer]) -> list[Officer]:
    return sort_by_fields(officers, ("id",))


def sort_allegations(allegations: Iterable[Allegation]) -> list[Allegation]:
    return sort_by_fields(allegations, ALLEGATION_SORT_FIELDS)


def sort_records(records: Iterable[CombinedRecord]) -> list[CombinedRecord]:
    return sort_by_fields(records, ALLEGATION_SORT_FIELDS)


def document_sort_key(document: BaseModel, fields: Sequence[str]) -> tuple:
    """Order by ``fields``, then by every upstream column so rows sharing a key still order the same way every run."""

    row = document.model_dump(by_alias=True)
    names = sorted(row)
    return field_sort_key(document, fields), tuple(zip(names, field_sort_key(row, names)))


def sort_closing_reports(reports: Iterable[ClosingReport]) -> list[ClosingReport]:
    return sorted(reports, key=lambda report: document_sort_key(report, ("complaint_id",)))


def sort_departure_letters(letters: Iterable[DepartureLetter]) -> list[DepartureLetter]:
    return sorted(letters, key=lambda letter: document_sort_key(letter, ("case_number", "last_name")))


def sort_raw_snapshot(rows: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    return sort_by_fields(rows, RAW_SNAPSHOT_SORT_FIELDS)


def dump_rows(models: Iterable[BaseModel], *, by_alias: bool = False) -> list[dict[str, Any]]:
    return [model.model_dump(by_alias=by_alias) for model in models]


def dump_json_rows(
    models: Iterable[BaseModel],
    *,
    by_alias: bool = False,
    transform: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> list[dict[str, Any]]:
    """Model dumps with empty fields elided, ready for JSON output."""

    rows = dump_rows(models, by_alias=by_alias)
    if transform is not None:
        rows = [transform(row) for row in rows]
    return [strip_record(row) for row in rows]
