"""Client for the analytics dashboard's query API."""

from .cursor import fetch_query_rows
from .decoder import (
    ApiDialect,
    ColumnCache,
    ColumnKind,
    ColumnSpec,
    DecodedRow,
    RawPage,
    RowDelta,
    decode_page,
    format_epoch_date,
    parse_page,
)
from .mapper import COMPLAINT_SCHEMA, OFFICER_SCHEMA, FieldSpec, map_allegations, map_officers
from .queries import QueryDefinition, build_payload, complaint_query, officer_query

__all__ = [
    "ApiDialect",
    "ColumnCache",
    "ColumnKind",
    "ColumnSpec",
    "DecodedRow",
    "RawPage",
    "RowDelta",
    "decode_page",
    "format_epoch_date",
    "parse_page",
    "fetch_query_rows",
    "FieldSpec",
    "OFFICER_SCHEMA",
    "COMPLAINT_SCHEMA",
    "map_officers",
    "map_allegations",
    "QueryDefinition",
    "build_payload",
    "complaint_query",
    "officer_query",
]
