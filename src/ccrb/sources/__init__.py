"""Upstream data sources."""

from .documents import fetch_closing_reports, fetch_departure_letters
from .opendata import OpenDataResult, convert_datasets, fetch_open_data
from .transport import HttpTransport, Transport

__all__ = [
    "HttpTransport",
    "OpenDataResult",
    "Transport",
    "convert_datasets",
    "fetch_closing_reports",
    "fetch_departure_letters",
    "fetch_open_data",
]
