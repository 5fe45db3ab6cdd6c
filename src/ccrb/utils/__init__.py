"""Utility helpers."""

from .files import compute_sha256
from .tabular import format_csv, parse_csv, to_json

__all__ = ["compute_sha256", "format_csv", "parse_csv", "to_json"]
