"""CCRB closing-report and departure-letter indexes."""

from __future__ import annotations

from typing import Mapping

from ..core.logging import get_logger
from ..models import ClosingReport, DepartureLetter
from ..normalize import sort_closing_reports, sort_departure_letters
from ..utils.tabular import parse_csv
from .transport import Transport

logger = get_logger(__name__)


def fetch_document_index(transport: Transport, url: str, doc_field: str, doc_prefix: str) -> list[dict[str, str]]:
    """Fetch an index CSV, turning the relative file names in ``doc_field`` into URLs."""

    logger.info("documents.fetch", url=url)
    rows = parse_csv(transport.fetch_text(url))
    for row in rows:
        row[doc_field] = doc_prefix + (row.get(doc_field) or "")
    return rows


def parse_closing_reports(rows: list[Mapping[str, str]]) -> list[ClosingReport]:
    return sort_closing_reports(ClosingReport.from_index_row(row) for row in rows if row.get("ComplaintId"))


def parse_departure_letters(rows: list[Mapping[str, str]]) -> list[DepartureLetter]:
    return sort_departure_letters(DepartureLetter.from_index_row(row) for row in rows if row.get("CaseNumber"))


def fetch_closing_reports(transport: Transport, url: str, prefix: str) -> list[ClosingReport]:
    reports = parse_closing_reports(fetch_document_index(transport, url, "WebsiteDocumentFileName", prefix))
    logger.info("documents.closing_reports", rows=len(reports))
    return reports


def fetch_departure_letters(transport: Transport, url: str, prefix: str) -> list[DepartureLetter]:
    letters = parse_departure_letters(fetch_document_index(transport, url, "FileLink", prefix))
    logger.info("documents.departure_letters", rows=len(letters))
    return letters
