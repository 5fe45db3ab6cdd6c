from __future__ import annotations

import pytest

from ccrb.errors import TransportError
from ccrb.sources.documents import fetch_closing_reports, fetch_departure_letters
from ccrb.sources.opendata import convert_datasets, fetch_open_data, snapshot_name
from ccrb.stores.file_writer import closing_reports_document, departure_letters_document
from ccrb.utils.tabular import parse_csv

from conftest import StubTransport


def _urls(settings) -> dict[str, str]:
    return {
        "allegations": settings.allegations_url,
        "complaints": settings.complaints_url,
        "officers": settings.officers_url,
        "penalties": settings.penalties_url,
    }


def test_open_data_snapshots_are_stripped_and_sorted(settings, open_data_texts) -> None:
    transport = StubTransport(texts=open_data_texts)
    persisted: dict[str, str] = {}

    fetch_open_data(
        transport,
        _urls(settings),
        volatile_fields=settings.volatile_fields,
        persist=lambda name, content: persisted.setdefault(name, content),
    )

    assert transport.text_calls == [
        settings.allegations_url,
        settings.complaints_url,
        settings.officers_url,
        settings.penalties_url,
    ]
    snapshot = parse_csv(persisted[snapshot_name("allegations")])
    assert [row["Allegation Record Identity"] for row in snapshot] == ["1", "2", "3", "4"]
    assert "As Of Date" not in snapshot[0]
    assert "Complaint Officer Number" not in snapshot[0]


def test_open_data_rows_are_renamed(settings, open_data_texts) -> None:
    result = fetch_open_data(StubTransport(texts=open_data_texts), _urls(settings))

    officers = {officer.id: officer for officer in result.officers}
    assert officers["200"].last_name == "BRUCEWATSON"
    assert officers["200"].first_name == "JONATHANSMITHERS"
    assert officers["200"].active is True
    assert officers["100"].active is False
    assert officers["100"].shield_no is None

    by_key = {(a.complaint_id, a.officer_id): a for a in result.allegations}
    assert by_key[("9001", "200")].complaint_date == "3/14/2019"
    assert by_key[("9001", "200")].board_disposition == "Substantiated (Command Discipline)"
    assert ("9002", None) in by_key
    assert len(result.penalties) == 3


def test_missing_complaint_leaves_date_empty() -> None:
    result = convert_datasets(
        {
            "allegations": [{"Complaint Id": "1", "Tax ID": "5", "Allegation": "Frisk"}],
            "complaints": [],
            "officers": [],
            "penalties": [],
        }
    )

    assert result.allegations[0].complaint_date is None


def test_open_data_transport_failure_propagates(settings) -> None:
    with pytest.raises(TransportError):
        fetch_open_data(StubTransport(texts={}), _urls(settings))


def test_closing_reports_get_absolute_urls(settings, open_data_texts) -> None:
    reports = fetch_closing_reports(
        StubTransport(texts=open_data_texts), settings.closing_reports_url, settings.closing_reports_prefix
    )

    assert [report.complaint_id for report in reports] == ["9001", "9002"]
    assert reports[0].document_url == "https://docs.test/closing/9001_redacted.pdf"

    document = closing_reports_document(reports)
    assert document["totalPosted"] == "2"
    assert document["lastPublishDate"] == "2024-05-01"
    assert document["closingReports"][0] == {
        "ComplaintId": "9001",
        "WebsiteDocumentFileName": "https://docs.test/closing/9001_redacted.pdf",
    }


def test_departure_letters_keep_upstream_columns(settings, open_data_texts) -> None:
    letters = fetch_departure_letters(
        StubTransport(texts=open_data_texts), settings.departure_letters_url, settings.departure_letters_prefix
    )

    assert letters[0].file_url == "https://docs.test/departure/9001_bruce.pdf"

    document = departure_letters_document(letters)
    assert document["lastPublishDate"] == "2024-05-02"
    assert document["departureLetters"][0] == {
        "CaseNumber": "9001",
        "LastName": "Bruce",
        "FirstName": "Jonathansm",
        "FileLink": "https://docs.test/departure/9001_bruce.pdf",
    }
