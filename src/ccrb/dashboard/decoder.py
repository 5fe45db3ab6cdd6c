"""Decoder for the dashboard query API's compressed row format.

A response page does not carry plain rows. Each row is a *delta* against the
previous row of the same query:

- the repeat mask marks columns whose value is unchanged from the previous row;
- the null mask marks columns that are null;
- every other column takes the next value from the delta's value list.

Text columns are dictionary coded (the value is an index into a per-page
dictionary) and date columns arrive as epoch milliseconds.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Sequence

from ..errors import DecodeError

Scalar = str | int | float | None
DecodedRow = tuple[Scalar, ...]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ColumnKind(enum.Enum):
    RAW = "raw"
    DATE = "date"
    DICTIONARY_LOOKUP = "dictionary_lookup"


@dataclass(frozen=True, slots=True)
class ApiDialect:
    """Key names and type codes of one upstream API version."""

    repeat_key: str = "R"
    null_key: str = "Ø"
    date_type_code: int = 7
    text_type_code: int = 1

    def kind_for(self, type_code: Any) -> ColumnKind:
        if type_code == self.date_type_code:
            return ColumnKind.DATE
        if type_code == self.text_type_code:
            return ColumnKind.DICTIONARY_LOOKUP
        return ColumnKind.RAW


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    kind: ColumnKind
    dictionary_id: str | None = None


@dataclass(frozen=True, slots=True)
class RowDelta:
    """One encoded row.

    ``values`` holds the new values last-column-first; the decoder consumes
    them from the tail.
    """

    values: tuple[Any, ...] = ()
    repeat_mask: int = 0
    null_mask: int = 0


@dataclass(frozen=True, slots=True)
class RawPage:
    columns: tuple[ColumnSpec, ...]
    dictionaries: Mapping[str, Sequence[str]]
    deltas: tuple[RowDelta, ...]
    restart_token: Any = None


@dataclass(slots=True)
class ColumnCache:
    """Last emitted value per column, carried across pages of a single query."""

    slots: list[Scalar] = field(default_factory=list)

    @classmethod
    def empty(cls, width: int) -> "ColumnCache":
        return cls(slots=[None] * width)

    def fit(self, width: int) -> None:
        if len(self.slots) < width:
            self.slots.extend([None] * (width - len(self.slots)))


def format_epoch_date(millis: int) -> str:
    """Render epoch milliseconds as ``M/D/YYYY`` using UTC fields."""

    moment = _EPOCH + timedelta(milliseconds=millis)
    return f"{moment.month}/{moment.day}/{moment.year}"


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _interpret(value: Any, column: ColumnSpec, index: int, dictionaries: Mapping[str, Sequence[str]]) -> Scalar:
    if not _is_integer(value):
        return value

    if column.kind is ColumnKind.DATE:
        return format_epoch_date(value)

    if column.kind is ColumnKind.DICTIONARY_LOOKUP:
        if column.dictionary_id is None:
            raise DecodeError(f"column {index} is dictionary coded but names no dictionary")
        try:
            dictionary = dictionaries[column.dictionary_id]
        except KeyError:
            raise DecodeError(f"column {index} references missing dictionary {column.dictionary_id!r}") from None
        if not 0 <= value < len(dictionary):
            raise DecodeError(
                f"column {index} index {value} is outside dictionary {column.dictionary_id!r} "
                f"({len(dictionary)} entries)"
            )
        return dictionary[value]

    return value


def decode_delta(delta: RowDelta, page: RawPage, cache: ColumnCache) -> DecodedRow:
    """Expand one delta into a full row, updating ``cache``."""

    width = len(page.columns)
    if delta.repeat_mask >> width or delta.null_mask >> width:
        raise DecodeError(f"row mask addresses columns beyond the {width} described")

    pending = list(delta.values)
    row: list[Scalar] = []

    for index, column in enumerate(page.columns):
        bit = 1 << index
        if delta.repeat_mask & bit:
            value = cache.slots[index]
        elif delta.null_mask & bit:
            value = None
        else:
            if not pending:
                raise DecodeError(f"row value list exhausted at column {index} of {width}")
            value = _interpret(pending.pop(), column, index, page.dictionaries)
        cache.slots[index] = value
        row.append(value)

    if pending:
        raise DecodeError(f"row carries {len(pending)} value(s) beyond the {width} described columns")

    return tuple(row)


def decode_page(page: RawPage, cache: ColumnCache) -> list[DecodedRow]:
    """Decode every delta of ``page`` in order."""

    if not page.deltas:
        return []
    if not page.columns:
        raise DecodeError("page has no column descriptor")

    cache.fit(len(page.columns))
    return [decode_delta(delta, page, cache) for delta in page.deltas]


def _parse_columns(descriptor: Any, dialect: ApiDialect) -> tuple[ColumnSpec, ...]:
    if not isinstance(descriptor, list) or not descriptor:
        raise DecodeError(f"malformed column descriptor: {descriptor!r}")

    columns: list[ColumnSpec] = []
    for entry in descriptor:
        if not isinstance(entry, Mapping) or "T" not in entry:
            raise DecodeError(f"malformed column descriptor entry: {entry!r}")
        dictionary_id = entry.get("DN")
        columns.append(ColumnSpec(kind=dialect.kind_for(entry["T"]), dictionary_id=dictionary_id))
    return tuple(columns)


def _dataset(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    try:
        return payload["results"][0]["result"]["data"]["dsr"]["DS"][0]
    except (KeyError, IndexError, TypeError):
        raise DecodeError("response does not contain results[0].result.data.dsr.DS[0]") from None


def _mask(raw: Mapping[str, Any], key: str) -> int:
    value = raw.get(key) or 0
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"row mask {key!r} is not an integer: {value!r}") from exc


def parse_page(
    payload: Mapping[str, Any],
    dialect: ApiDialect,
    previous_columns: tuple[ColumnSpec, ...] | None = None,
) -> RawPage:
    """Build a :class:`RawPage` from a raw JSON response."""

    dataset = _dataset(payload)

    raw_rows: list[Mapping[str, Any]] = []
    for group in dataset.get("PH") or []:
        raw_rows.extend(group.get("DM0") or [])

    columns = previous_columns
    if raw_rows and "S" in raw_rows[0]:
        columns = _parse_columns(raw_rows[0]["S"], dialect)
    if columns is None:
        if raw_rows:
            raise DecodeError("first page row carries no column descriptor")
        columns = ()

    deltas: list[RowDelta] = []
    for raw in raw_rows:
        values = raw.get("C") or []
        deltas.append(
            RowDelta(
                values=tuple(reversed(values)),
                repeat_mask=_mask(raw, dialect.repeat_key),
                null_mask=_mask(raw, dialect.null_key),
            )
        )

    dictionaries = {key: list(values) for key, values in (dataset.get("ValueDicts") or {}).items()}

    return RawPage(
        columns=columns,
        dictionaries=dictionaries,
        deltas=tuple(deltas),
        restart_token=dataset.get("RT"),
    )
