"""NYC Open Data CCRB complaint database (four CSV views)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from ..core.logging import get_logger
from ..models import Allegation, Officer, Penalty
from ..normalize import sort_raw_snapshot, strip_volatile
from ..utils.tabular import format_csv, parse_csv
from .transport import Transport

logger = get_logger(__name__)

Row = Mapping[str, str]
Persist = Callable[[str, str], object]

DATASETS: tuple[str, ...] = ("allegations", "complaints", "officers", "penalties")


@dataclass(slots=True)
class OpenDataResult:
    officers: list[Officer] = field(default_factory=list)
    allegations: list[Allegation] = field(default_factory=list)
    penalties: list[Penalty] = field(default_factory=list)


def snapshot_name(dataset: str) -> str:
    return f"ccrb-complaints-database-{dataset}.csv"


def fetch_dataset(
    transport: Transport,
    url: str,
    *,
    volatile_fields: Sequence[str] = (),
) -> list[dict[str, str]]:
    """Download one view with volatile columns removed, in a stable order."""

    logger.info("opendata.fetch", url=url)
    rows = strip_volatile(parse_csv(transport.fetch_text(url)), volatile_fields)
    return [dict(row) for row in sort_raw_snapshot(rows)]


def _blank_to_none(value: str | None) -> str | None:
    return value if value else None


def convert_officer(row: Row) -> Officer:
    return Officer(
        id=row["Tax ID"],
        command=_blank_to_none(row.get("Current Command")),
        last_name=(row.get("Officer Last Name") or "").upper(),
        first_name=(row.get("Officer First Name") or "").upper(),
        rank=_blank_to_none(row.get("Current Rank")),
        shield_no=_blank_to_none(row.get("Shield No")),
        active=row.get("Active Per Last Reported Status") == "Yes",
    )


def convert_allegation(row: Row, incident_dates: Mapping[str, str]) -> Allegation:
    complaint_id = row["Complaint Id"]
    return Allegation(
        officer_id=_blank_to_none(row.get("Tax ID")),
        complaint_id=complaint_id,
        complaint_date=_blank_to_none(incident_dates.get(complaint_id)),
        fado_type=row.get("FADO Type"),
        allegation=row.get("Allegation"),
        board_disposition=row.get("CCRB Allegation Disposition"),
        nypd_disposition=row.get("NYPD Allegation Disposition"),
        penalty_desc="",
    )


def convert_penalty(row: Row) -> Penalty:
    return Penalty(
        complaint_id=row.get("Complaint Id") or "",
        officer_id=row.get("Tax ID") or "",
        penalty_desc=row.get("NYPD Officer Penalty") or "",
    )


def convert_datasets(datasets: Mapping[str, Sequence[Row]]) -> OpenDataResult:
    """Rename open-data columns into the entity model."""

    incident_dates = {
        row["Complaint Id"]: row.get("Incident Date") or ""
        for row in datasets.get("complaints", [])
        if row.get("Complaint Id")
    }

    officers = [convert_officer(row) for row in datasets.get("officers", []) if row.get("Tax ID")]
    allegations = [
        convert_allegation(row, incident_dates)
        for row in datasets.get("allegations", [])
        if row.get("Complaint Id")
    ]
    penalties = [convert_penalty(row) for row in datasets.get("penalties", [])]

    return OpenDataResult(officers=officers, allegations=allegations, penalties=penalties)


def fetch_open_data(
    transport: Transport,
    urls: Mapping[str, str],
    *,
    volatile_fields: Sequence[str] = (),
    persist: Persist | None = None,
) -> OpenDataResult:
    """Fetch every view in ``DATASETS`` in turn, snapshotting each raw download."""

    datasets: dict[str, list[dict[str, str]]] = {}
    for dataset in DATASETS:
        rows = fetch_dataset(transport, urls[dataset], volatile_fields=volatile_fields)
        if persist is not None:
            persist(snapshot_name(dataset), format_csv(rows))
        datasets[dataset] = rows
        logger.info("opendata.dataset", dataset=dataset, rows=len(rows))

    return convert_datasets(datasets)
