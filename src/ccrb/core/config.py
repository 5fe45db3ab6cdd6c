"""Harvest configuration powered by Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENDATA_BASE = "https://data.cityofnewyork.us/api/views"
CCRB_ASSETS = "https://www.nyc.gov/assets/ccrb/csv"
CCRB_DOWNLOADS = "https://www1.nyc.gov/assets/ccrb/downloads/pdf"


class HarvestSettings(BaseSettings):
    """Strongly typed harvest settings."""

    model_config = SettingsConfigDict(
        env_prefix="CCRB_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    source: Literal["opendata", "dashboard"] = Field(default="opendata")
    output_dir: Path = Field(default=Path("./data"))
    log_level: str = Field(default="INFO")

    request_timeout: float = Field(default=60.0, gt=0)
    user_agent: str = Field(default="ccrb-records/0.1 (+https://www.nyc.gov/site/ccrb)")

    allegations_url: str = Field(default=f"{OPENDATA_BASE}/6xgr-kwjq/rows.csv?accessType=DOWNLOAD")
    complaints_url: str = Field(default=f"{OPENDATA_BASE}/2mby-ccnw/rows.csv?accessType=DOWNLOAD")
    officers_url: str = Field(default=f"{OPENDATA_BASE}/2fir-qns4/rows.csv?accessType=DOWNLOAD")
    penalties_url: str = Field(default=f"{OPENDATA_BASE}/keep-pkmh/rows.csv?accessType=DOWNLOAD")
    volatile_fields: list[str] = Field(default_factory=lambda: ["As Of Date", "Complaint Officer Number"])

    closing_reports_url: str = Field(default=f"{CCRB_ASSETS}/closing-reports/redacted-closing-reports.csv")
    closing_reports_prefix: str = Field(default=f"{CCRB_DOWNLOADS}/closing-reports/")
    departure_letters_url: str = Field(default=f"{CCRB_ASSETS}/departure-letter/RedactedDepartureLetters.csv")
    departure_letters_prefix: str = Field(
        default=f"{CCRB_DOWNLOADS}/complaints/complaint-outcomes/redacted-departure-letters/"
    )

    querydata_url: str = Field(
        default="https://wabi-us-gov-iowa-api.analysis.usgovcloudapi.net/public/reports/querydata?synchronous=true"
    )
    dataset_id: str = Field(default="")
    report_id: str = Field(default="")
    model_id: int = Field(default=0)
    resource_key: str | None = None
    page_size: int = Field(default=500, ge=2, le=30000)

    # Row-encoding keys differ between API versions; check a live response before changing.
    repeat_key: str = Field(default="R")
    null_key: str = Field(default="Ø")
    date_type_code: int = Field(default=7)
    text_type_code: int = Field(default=1)


@lru_cache
def get_settings() -> HarvestSettings:
    """Provide a cached singleton settings instance."""

    return HarvestSettings()
