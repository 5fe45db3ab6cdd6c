"""Pydantic schemas for harvested entities."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Officer(BaseModel):
    id: str
    command: str | None = None
    last_name: str = ""
    first_name: str = ""
    rank: str | None = None
    shield_no: str | None = None
    active: bool = False


class Allegation(BaseModel):
    officer_id: str | None = None
    complaint_id: str
    complaint_date: str | None = None
    fado_type: str | None = None
    allegation: str | None = None
    board_disposition: str | None = None
    nypd_disposition: str | None = None
    penalty_desc: str | None = ""


class Penalty(BaseModel):
    complaint_id: str
    officer_id: str
    penalty_desc: str = ""


class IndexRow(BaseModel):
    """A row of a CCRB document index; unknown upstream columns are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _columns: tuple[str, ...] = PrivateAttr(default=())

    @classmethod
    def from_index_row(cls, row: Mapping[str, Any]):
        document = cls.model_validate(row)
        document._columns = tuple(row)
        return document

    @property
    def columns(self) -> tuple[str, ...]:
        """Upstream header order, falling back to the alias dump order."""

        dumped = tuple(self.model_dump(by_alias=True))
        upstream = tuple(name for name in self._columns if name in dumped)
        return upstream + tuple(name for name in dumped if name not in upstream)


class ClosingReport(IndexRow):
    """One row of the closing-report index."""

    complaint_id: str = Field(alias="ComplaintId")
    document_url: str = Field(default="", alias="WebsiteDocumentFileName")


class DepartureLetter(IndexRow):
    """One row of the departure-letter index."""

    case_number: str = Field(alias="CaseNumber")
    last_name: str = Field(default="", alias="LastName")
    first_name: str = Field(default="", alias="FirstName")
    file_url: str = Field(default="", alias="FileLink")


class CombinedRecord(BaseModel):
    """An allegation joined with its officer and documents."""

    model_config = ConfigDict(frozen=True)

    officer_id: str
    command: str | None = None
    last_name: str | None = None
    first_name: str | None = None
    rank: str | None = None
    shield_no: str | None = None
    active: bool | None = None
    complaint_id: str
    complaint_date: str | None = None
    fado_type: str | None = None
    allegation: str | None = None
    board_disposition: str | None = None
    nypd_disposition: str | None = None
    penalty_desc: str | None = None
    closing_report_url: str | None = None
    departure_letter_url: str | None = None
