"""Join officers, allegations, penalties and CCRB documents into combined records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .core.logging import get_logger
from .models import Allegation, ClosingReport, CombinedRecord, DepartureLetter, Officer, Penalty
from .normalize import (
    canonical_case,
    sort_allegations,
    sort_closing_reports,
    sort_departure_letters,
    sort_records,
)

logger = get_logger(__name__)

SUBSTANTIATED_PREFIX = "Substantiated"
# One officer's surname was entered with the given name run into it.
SURNAME_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (("BRUCEWATSON", "BRUCE"),)
FIRST_NAME_PREFIX = 10


def penalty_key(complaint_id: str | None, officer_id: str | None) -> str:
    return f"{complaint_id}:{officer_id}"


def prepare_allegations(
    allegations: Iterable[Allegation],
    penalties: Iterable[Penalty] | None = None,
) -> list[Allegation]:
    """Drop unattributable allegations, attach penalties and fix known casing.

    ``penalties`` of ``None`` keeps whatever ``penalty_desc`` the allegations
    already carry, but only on substantiated allegations.
    """

    attributable = [allegation for allegation in allegations if allegation.officer_id]

    penalty_by_key: dict[str, str] | None = None
    if penalties is not None:
        penalty_by_key = {
            penalty_key(penalty.complaint_id, penalty.officer_id): penalty.penalty_desc
            for penalty in penalties
            if penalty.penalty_desc
        }

    prepared: list[Allegation] = []
    for allegation in attributable:
        penalty_desc = ""
        if (allegation.board_disposition or "").startswith(SUBSTANTIATED_PREFIX):
            if penalty_by_key is None:
                penalty_desc = allegation.penalty_desc or ""
            else:
                penalty_desc = penalty_by_key.get(
                    penalty_key(allegation.complaint_id, allegation.officer_id), ""
                )

        prepared.append(
            allegation.model_copy(
                update={
                    "allegation": canonical_case(allegation.allegation),
                    "penalty_desc": canonical_case(penalty_desc),
                }
            )
        )

    return sort_allegations(prepared)


def _officer_surname(officer: Officer) -> str:
    surname = officer.last_name or ""
    for variant, canonical in SURNAME_SUBSTITUTIONS:
        surname = surname.replace(variant, canonical)
    return surname.upper()


def letter_matches_officer(letter: DepartureLetter, officer: Officer | None) -> bool:
    """Names in the letter index are truncated upstream, so first names compare by prefix."""

    if officer is None:
        return False
    if (letter.last_name or "").upper() != _officer_surname(officer):
        return False
    letter_first = (letter.first_name or "")[:FIRST_NAME_PREFIX].upper()
    officer_first = (officer.first_name or "")[:FIRST_NAME_PREFIX].upper()
    return letter_first == officer_first


@dataclass(slots=True)
class JoinStats:
    missing_officer: int = 0
    missing_closing_report: int = 0
    rejected_departure_letter: int = 0


def combine_records(
    officers: Sequence[Officer],
    allegations: Iterable[Allegation],
    closing_reports: Iterable[ClosingReport],
    departure_letters: Iterable[DepartureLetter],
) -> list[CombinedRecord]:
    """Build one combined record per prepared allegation; missing joins leave fields empty."""

    officer_by_id = {officer.id: officer for officer in officers}
    # duplicate keys resolve to the first document in sorted order
    report_by_complaint: dict[str, ClosingReport] = {}
    for report in sort_closing_reports(closing_reports):
        report_by_complaint.setdefault(report.complaint_id, report)
    letter_by_case: dict[str, DepartureLetter] = {}
    for letter in sort_departure_letters(departure_letters):
        letter_by_case.setdefault(letter.case_number, letter)

    stats = JoinStats()
    records: list[CombinedRecord] = []

    for allegation in allegations:
        officer = officer_by_id.get(allegation.officer_id or "")
        report = report_by_complaint.get(allegation.complaint_id)
        letter = letter_by_case.get(allegation.complaint_id)

        if officer is None:
            stats.missing_officer += 1
        if report is None:
            stats.missing_closing_report += 1
        if letter is not None and not letter_matches_officer(letter, officer):
            stats.rejected_departure_letter += 1
            letter = None

        fields = officer.model_dump(exclude={"id"}) if officer is not None else {}
        fields.update(allegation.model_dump())
        fields["closing_report_url"] = (report.document_url or None) if report is not None else None
        fields["departure_letter_url"] = (letter.file_url or None) if letter is not None else None

        records.append(CombinedRecord(**fields))

    logger.info(
        "reconcile.join_gaps",
        records=len(records),
        missing_officer=stats.missing_officer,
        missing_closing_report=stats.missing_closing_report,
        rejected_departure_letter=stats.rejected_departure_letter,
    )
    return sort_records(records)


def reconcile(
    officers: Sequence[Officer],
    allegations: Iterable[Allegation],
    penalties: Iterable[Penalty] | None,
    closing_reports: Iterable[ClosingReport],
    departure_letters: Iterable[DepartureLetter],
) -> list[CombinedRecord]:
    prepared = prepare_allegations(allegations, penalties)
    return combine_records(officers, prepared, closing_reports, departure_letters)
