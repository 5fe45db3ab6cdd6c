from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from ..core.logging import get_logger
from ..models import Allegation, ClosingReport, CombinedRecord, DepartureLetter, IndexRow, Officer
from ..normalize import dump_json_rows, dump_rows
from ..utils.files import compute_sha256
from ..utils.tabular import format_csv, to_json

logger = get_logger(__name__)

CLOSING_REPORT_TOTALS = ("totalPosted", "totalClosedCase", "LastPublishDate")
DEPARTURE_LETTER_VOLATILE = ("Id", "LastPublishDate")


@dataclass(slots=True)
class PersistedFile:
    name: str
    path: Path
    sha256: str
    size: int


@dataclass(slots=True)
class FileStore:
    output_dir: Path
    written: list[PersistedFile] = field(default_factory=list)

    def persist(self, name: str, content: str) -> Path:
        """Write ``content`` to ``name`` under the output directory."""

        self.output_dir.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8")
        path = self.output_dir / name
        path.write_bytes(data)

        persisted = PersistedFile(name=name, path=path, sha256=compute_sha256(data), size=len(data))
        self.written.append(persisted)
        logger.info("store.persist", name=name, bytes=persisted.size, sha256=persisted.sha256[:12])
        return path


def _index_columns(documents: Sequence[IndexRow]) -> list[str] | None:
    return list(documents[0].columns) if documents else None


def _without(row: dict[str, Any], keys: Sequence[str]) -> dict[str, Any]:
    return {key: value for key, value in row.items() if key not in keys}


def closing_reports_document(reports: Sequence[ClosingReport]) -> dict[str, Any]:
    """JSON envelope that lifts the index-wide totals out of every row."""

    rows = dump_rows(reports, by_alias=True)
    first = rows[0] if rows else {}
    return {
        "totalPosted": first.get("totalPosted"),
        "totalClosedCase": first.get("totalClosedCase"),
        "lastPublishDate": first.get("LastPublishDate"),
        "closingReports": dump_json_rows(
            reports, by_alias=True, transform=lambda row: _without(row, CLOSING_REPORT_TOTALS)
        ),
    }


def departure_letters_document(letters: Sequence[DepartureLetter]) -> dict[str, Any]:
    rows = dump_rows(letters, by_alias=True)
    first = rows[0] if rows else {}
    return {
        "lastPublishDate": first.get("LastPublishDate"),
        "departureLetters": dump_json_rows(
            letters, by_alias=True, transform=lambda row: _without(row, DEPARTURE_LETTER_VOLATILE)
        ),
    }


def save_outputs(
    store: FileStore,
    *,
    officers: Sequence[Officer],
    allegations: Sequence[Allegation],
    closing_reports: Sequence[ClosingReport],
    departure_letters: Sequence[DepartureLetter],
    records: Sequence[CombinedRecord],
) -> None:
    """Write every artifact of a run; inputs are expected already sorted."""

    store.persist("officers.csv", format_csv(dump_rows(officers), list(Officer.model_fields)))
    store.persist("officers.json", to_json(dump_json_rows(officers)))

    store.persist("complaints.csv", format_csv(dump_rows(allegations), list(Allegation.model_fields)))
    store.persist("complaints.json", to_json(dump_json_rows(allegations)))

    store.persist(
        "closingreports.csv",
        format_csv(dump_rows(closing_reports, by_alias=True), _index_columns(closing_reports)),
    )
    store.persist("closingreports.json", to_json(closing_reports_document(closing_reports)))

    store.persist(
        "departureletters.csv",
        format_csv(dump_rows(departure_letters, by_alias=True), _index_columns(departure_letters)),
    )
    store.persist("departureletters.json", to_json(departure_letters_document(departure_letters)))

    store.persist("records.csv", format_csv(dump_rows(records), list(CombinedRecord.model_fields)))
    store.persist("records.json", to_json(dump_json_rows(records)))
