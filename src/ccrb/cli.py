"""Typer-based CLI for running harvests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from ccrb.core.config import get_settings
from ccrb.core.logging import get_logger, setup_logging
from ccrb.dashboard.decoder import ColumnCache, decode_page, parse_page
from ccrb.errors import HarvestError
from ccrb.pipeline import HarvestPipeline, dialect_from_settings
from ccrb.sources.transport import HttpTransport
from ccrb.utils.tabular import format_csv

app = typer.Typer(help="Harvest and reconcile CCRB misconduct records")
logger = get_logger(__name__)

_SOURCES = ("opendata", "dashboard")


@app.command()
def run(
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Officer/allegation source: opendata or dashboard."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for the generated artifacts."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=2, help="Rows requested per dashboard page."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every dashboard page."),
):
    """Fetch every source and write the reconciled dataset."""

    if source is not None and source not in _SOURCES:
        raise typer.BadParameter(f"expected one of {', '.join(_SOURCES)}", param_hint="--source")

    overrides: dict = {}
    if source is not None:
        overrides["source"] = source
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if page_size is not None:
        overrides["page_size"] = page_size
    settings = get_settings().model_copy(update=overrides)

    setup_logging(logging.DEBUG if verbose else settings.log_level)

    typer.secho(f"Starting {settings.source} harvest into {settings.output_dir}...", fg=typer.colors.CYAN)
    try:
        with HttpTransport(timeout=settings.request_timeout, user_agent=settings.user_agent) as transport:
            result = HarvestPipeline(settings=settings, transport=transport).run()
    except HarvestError as exc:
        logger.error("harvest.failed", error=str(exc), error_type=type(exc).__name__)
        typer.secho(f"Harvest failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.secho("Harvest complete", fg=typer.colors.GREEN)
    typer.echo(f"Officers: {result.officers}")
    typer.echo(f"Allegations: {result.allegations}")
    typer.echo(f"Closing reports: {result.closing_reports}")
    typer.echo(f"Departure letters: {result.departure_letters}")
    typer.echo(f"Combined records: {result.records}")


@app.command()
def decode(
    response_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Saved querydata response (JSON)."),
):
    """Decode one saved dashboard response and print its rows as CSV."""

    settings = get_settings()
    try:
        payload = json.loads(response_path.read_text(encoding="utf-8"))
        page = parse_page(payload, dialect_from_settings(settings))
        rows = decode_page(page, ColumnCache())
    except (ValueError, HarvestError) as exc:
        typer.secho(f"Cannot decode {response_path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    columns = [f"col{index}" for index in range(len(page.columns))]
    typer.echo(format_csv([dict(zip(columns, row)) for row in rows], columns), nl=False)
    if page.restart_token is not None:
        typer.secho("Response carries a restart token; more pages are available.", fg=typer.colors.YELLOW, err=True)


if __name__ == "__main__":  # pragma: no cover
    app()
