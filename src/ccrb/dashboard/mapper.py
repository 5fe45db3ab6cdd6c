"""Map positional dashboard rows onto named entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Literal

from ..core.logging import get_logger
from ..errors import DecodeError
from ..models import Allegation, Officer
from .decoder import DecodedRow, Scalar

logger = get_logger(__name__)

Hint = Literal["text", "upper", "identifier"]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    position: int
    name: str
    hint: Hint = "text"


OFFICER_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec(0, "id", "identifier"),
    FieldSpec(1, "command"),
    FieldSpec(2, "last_name", "upper"),
    FieldSpec(3, "first_name", "upper"),
    FieldSpec(4, "rank"),
    FieldSpec(5, "shield_no", "identifier"),
)

COMPLAINT_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec(0, "officer_id", "identifier"),
    FieldSpec(1, "complaint_id", "identifier"),
    FieldSpec(2, "complaint_date"),
    FieldSpec(3, "fado_type"),
    FieldSpec(4, "allegation"),
    FieldSpec(5, "board_disposition"),
    FieldSpec(6, "nypd_disposition"),
    FieldSpec(7, "penalty_desc"),
)


def _as_text(value: Scalar) -> str | None:
    return None if value is None else str(value)


def _as_upper(value: Scalar) -> str:
    return "" if value is None else str(value).upper()


def _as_identifier(value: Scalar) -> str | None:
    # identifiers can arrive as numbers; 12345.0 must still read "12345"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _as_text(value)


_CONVERTERS: dict[str, Callable[[Scalar], Any]] = {
    "text": _as_text,
    "upper": _as_upper,
    "identifier": _as_identifier,
}


def map_row(row: DecodedRow, schema: Iterable[FieldSpec]) -> dict[str, Any]:
    """Apply ``schema`` to a single decoded row."""

    record: dict[str, Any] = {}
    for spec in schema:
        if spec.position >= len(row):
            raise DecodeError(f"row has {len(row)} columns, {spec.name!r} expects position {spec.position}")
        record[spec.name] = _CONVERTERS[spec.hint](row[spec.position])
    return record


def map_officers(rows: Iterable[DecodedRow], *, active: bool) -> list[Officer]:
    """Build officers from a roster query; ``active`` names the roster variant."""

    officers: list[Officer] = []
    skipped = 0
    for row in rows:
        record = map_row(row, OFFICER_SCHEMA)
        if not record["id"]:
            skipped += 1
            continue
        officers.append(Officer(**record, active=active))

    if skipped:
        logger.warning("mapper.officers_without_id", skipped=skipped, active=active)
    return officers


def map_allegations(rows: Iterable[DecodedRow]) -> list[Allegation]:
    allegations: list[Allegation] = []
    skipped = 0
    for row in rows:
        record = map_row(row, COMPLAINT_SCHEMA)
        if not record["complaint_id"]:
            skipped += 1
            continue
        if record["penalty_desc"] is None:
            record["penalty_desc"] = ""
        allegations.append(Allegation(**record))

    if skipped:
        logger.warning("mapper.allegations_without_complaint", skipped=skipped)
    return allegations
