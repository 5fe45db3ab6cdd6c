"""Shared fixtures and stubs for the harvester tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from ccrb.core.config import HarvestSettings
from ccrb.errors import TransportError

TEXT = {"T": 1, "DN": "D0"}
NUMBER = {"T": 4}
DATE = {"T": 7}


def make_response(
    rows: list[dict[str, Any]],
    *,
    descriptor: list[dict[str, Any]] | None = None,
    dictionaries: dict[str, list[str]] | None = None,
    restart: Any = None,
) -> dict[str, Any]:
    """Shape rows the way the querydata endpoint returns them."""

    dm0 = [dict(row) for row in rows]
    if descriptor is not None and dm0:
        dm0[0]["S"] = descriptor
    dataset: dict[str, Any] = {"N": "DS0", "PH": [{"DM0": dm0}], "ValueDicts": dictionaries or {}}
    if restart is not None:
        dataset["RT"] = restart
    return {"results": [{"result": {"data": {"dsr": {"DS": [dataset]}}}}]}


def plain_response(values: list[list[Any]], *, restart: Any = None) -> dict[str, Any]:
    """Rows with every column spelled out (no masks), raw-typed columns."""

    width = len(values[0]) if values else 0
    return make_response(
        [{"C": list(row)} for row in values],
        descriptor=[dict(NUMBER) for _ in range(width)],
        restart=restart,
    )


class StubTransport:
    """Transport returning canned CSV bodies and queued JSON responses."""

    def __init__(self, *, texts: dict[str, str] | None = None, responses: list[Any] | None = None) -> None:
        self.texts = texts or {}
        self.responses = list(responses or [])
        self.text_calls: list[str] = []
        self.json_calls: list[tuple[str, dict, dict | None]] = []

    def fetch_text(self, url: str) -> str:
        self.text_calls.append(url)
        if url not in self.texts:
            raise TransportError(url, "HTTP 404: not found", status_code=404)
        return self.texts[url]

    def fetch_json(self, url: str, body, headers=None) -> Any:
        self.json_calls.append((url, copy.deepcopy(body), dict(headers) if headers else None))
        if not self.responses:  # pragma: no cover - defensive guard
            raise AssertionError("StubTransport received more requests than configured")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def settings(tmp_path) -> HarvestSettings:
    return HarvestSettings(
        _env_file=None,
        output_dir=tmp_path / "out",
        allegations_url="https://example.test/allegations.csv",
        complaints_url="https://example.test/complaints.csv",
        officers_url="https://example.test/officers.csv",
        penalties_url="https://example.test/penalties.csv",
        closing_reports_url="https://example.test/closing.csv",
        closing_reports_prefix="https://docs.test/closing/",
        departure_letters_url="https://example.test/departure.csv",
        departure_letters_prefix="https://docs.test/departure/",
        querydata_url="https://dashboard.test/querydata",
        dataset_id="dataset-1",
        report_id="report-1",
        model_id=42,
        page_size=3,
    )


OFFICERS_CSV = (
    "As Of Date,Tax ID,Officer First Name,Officer Last Name,Current Rank,Current Command,Shield No,"
    "Active Per Last Reported Status\n"
    "06/01/2024,200,Jonathansmithers,Brucewatson,Police Officer,PCT 040,1234,Yes\n"
    "06/01/2024,100,Maria,Lopez,Sergeant,PCT 001,,No\n"
)

COMPLAINTS_CSV = (
    "As Of Date,Complaint Id,Incident Date\n"
    "06/01/2024,9001,3/14/2019\n"
    "06/01/2024,9002,7/4/2020\n"
)

ALLEGATIONS_CSV = (
    "As Of Date,Allegation Record Identity,Complaint Id,Complaint Officer Number,Tax ID,FADO Type,Allegation,"
    "CCRB Allegation Disposition,NYPD Allegation Disposition\n"
    "06/01/2024,2,9001,7,200,Force,gun POINTED,Substantiated (Command Discipline),Formalized Training\n"
    "06/01/2024,1,9001,3,100,Abuse of Authority,Frisk,Unsubstantiated,\n"
    "06/01/2024,3,9002,1,,Discourtesy,Word,Substantiated (Charges),Charges\n"
    "06/01/2024,4,9002,2,100,Force,Physical force,Substantiated (Charges),Charges\n"
)

PENALTIES_CSV = (
    "As Of Date,Complaint Id,Tax ID,NYPD Officer Penalty\n"
    "06/01/2024,9001,200,NO PENALTY\n"
    "06/01/2024,9001,100,Forfeit vacation 5 days\n"
    "06/01/2024,9002,100,\n"
)

CLOSING_CSV = (
    "ComplaintId,WebsiteDocumentFileName,totalPosted,totalClosedCase,LastPublishDate\n"
    "9002,9002_redacted.pdf,2,10,2024-05-01\n"
    "9001,9001_redacted.pdf,2,10,2024-05-01\n"
)

DEPARTURE_CSV = (
    "Id,CaseNumber,LastName,FirstName,FileLink,LastPublishDate\n"
    "1,9001,Bruce,Jonathansm,9001_bruce.pdf,2024-05-02\n"
    "2,9002,Lopez,Mario,9002_lopez.pdf,2024-05-02\n"
)


@pytest.fixture
def open_data_texts(settings) -> dict[str, str]:
    return {
        settings.allegations_url: ALLEGATIONS_CSV,
        settings.complaints_url: COMPLAINTS_CSV,
        settings.officers_url: OFFICERS_CSV,
        settings.penalties_url: PENALTIES_CSV,
        settings.closing_reports_url: CLOSING_CSV,
        settings.departure_letters_url: DEPARTURE_CSV,
    }
