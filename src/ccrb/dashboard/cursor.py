"""Pagination over the dashboard query API."""

from __future__ import annotations

from typing import Any, Mapping

from ..core.logging import get_logger
from ..errors import DecodeError
from ..sources.transport import Transport
from .decoder import ApiDialect, ColumnCache, ColumnSpec, DecodedRow, decode_page, parse_page
from .queries import with_restart_tokens

logger = get_logger(__name__)


def fetch_query_rows(
    transport: Transport,
    url: str,
    payload: dict[str, Any],
    *,
    dialect: ApiDialect,
    headers: Mapping[str, str] | None = None,
    label: str = "query",
) -> list[DecodedRow]:
    """Fetch every page of one query and return its rows in page order.

    The API repeats the last row of a page as the first row of the next one,
    so the last row is dropped whenever a restart token is returned.
    """

    cache = ColumnCache()
    columns: tuple[ColumnSpec, ...] | None = None
    rows: list[DecodedRow] = []
    page_number = 0

    while True:
        page_number += 1
        response = transport.fetch_json(url, payload, headers)
        page = parse_page(response, dialect, previous_columns=columns)
        columns = page.columns or columns

        page_rows = decode_page(page, cache)
        rows.extend(page_rows)
        logger.debug(
            "dashboard.page",
            query=label,
            page=page_number,
            rows=len(page_rows),
            has_more=page.restart_token is not None,
        )

        if page.restart_token is None:
            break
        if not page_rows:
            raise DecodeError(f"{label}: restart token returned with an empty page {page_number}")

        rows.pop()
        payload = with_restart_tokens(payload, page.restart_token)

    logger.info("dashboard.query_complete", query=label, pages=page_number, rows=len(rows))
    return rows
