"""High-level harvest workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.console import Console
from rich.table import Table

from .core.config import HarvestSettings
from .core.logging import bind_run_context, get_logger
from .dashboard.cursor import fetch_query_rows
from .dashboard.decoder import ApiDialect
from .dashboard.mapper import map_allegations, map_officers
from .dashboard.queries import build_payload, complaint_query, officer_query
from .errors import HarvestError
from .models import Allegation, Officer, Penalty
from .normalize import sort_officers
from .reconcile import combine_records, prepare_allegations
from .sources.documents import fetch_closing_reports, fetch_departure_letters
from .sources.opendata import fetch_open_data
from .sources.transport import Transport
from .stores.file_writer import FileStore, PersistedFile, save_outputs

console = Console(stderr=True)
logger = get_logger(__name__)


def dialect_from_settings(settings: HarvestSettings) -> ApiDialect:
    return ApiDialect(
        repeat_key=settings.repeat_key,
        null_key=settings.null_key,
        date_type_code=settings.date_type_code,
        text_type_code=settings.text_type_code,
    )


@dataclass(slots=True)
class HarvestResult:
    officers: int
    allegations: int
    closing_reports: int
    departure_letters: int
    records: int
    files: list[PersistedFile] = field(default_factory=list)


@dataclass(slots=True)
class HarvestPipeline:
    settings: HarvestSettings
    transport: Transport
    store: FileStore | None = None

    def run(self) -> HarvestResult:
        settings = self.settings
        store = self.store or FileStore(settings.output_dir)
        bind_run_context(source=settings.source, output_dir=str(store.output_dir))
        console.rule(f"[bold cyan]Harvest start[/] :: {settings.source}")

        if settings.source == "dashboard":
            officers, allegations, penalties = self._fetch_dashboard()
        else:
            officers, allegations, penalties = self._fetch_open_data(store)

        allegations = prepare_allegations(allegations, penalties)
        officers = sort_officers(officers)

        closing_reports = fetch_closing_reports(
            self.transport, settings.closing_reports_url, settings.closing_reports_prefix
        )
        departure_letters = fetch_departure_letters(
            self.transport, settings.departure_letters_url, settings.departure_letters_prefix
        )

        records = combine_records(officers, allegations, closing_reports, departure_letters)

        save_outputs(
            store,
            officers=officers,
            allegations=allegations,
            closing_reports=closing_reports,
            departure_letters=departure_letters,
            records=records,
        )

        self._print_summary(store)

        return HarvestResult(
            officers=len(officers),
            allegations=len(allegations),
            closing_reports=len(closing_reports),
            departure_letters=len(departure_letters),
            records=len(records),
            files=list(store.written),
        )

    def _fetch_open_data(self, store: FileStore) -> tuple[list[Officer], list[Allegation], list[Penalty]]:
        settings = self.settings
        result = fetch_open_data(
            self.transport,
            {
                "allegations": settings.allegations_url,
                "complaints": settings.complaints_url,
                "officers": settings.officers_url,
                "penalties": settings.penalties_url,
            },
            volatile_fields=settings.volatile_fields,
            persist=store.persist,
        )
        return result.officers, result.allegations, result.penalties

    def _fetch_dashboard(self) -> tuple[list[Officer], list[Allegation], None]:
        settings = self.settings
        if not settings.dataset_id or not settings.report_id:
            raise HarvestError("dashboard source requires CCRB_DATASET_ID and CCRB_REPORT_ID")

        dialect = dialect_from_settings(settings)
        headers = {"X-PowerBI-ResourceKey": settings.resource_key} if settings.resource_key else {}

        def rows_for(definition):
            payload = build_payload(
                definition,
                dataset_id=settings.dataset_id,
                report_id=settings.report_id,
                model_id=settings.model_id,
                page_size=settings.page_size,
            )
            return fetch_query_rows(
                self.transport,
                settings.querydata_url,
                payload,
                dialect=dialect,
                headers=headers,
                label=definition.name,
            )

        officers: dict[str, Officer] = {}
        duplicates = 0
        for active in (True, False):
            for officer in map_officers(rows_for(officer_query(active=active)), active=active):
                if officer.id in officers:
                    duplicates += 1
                    continue
                officers[officer.id] = officer
        if duplicates:
            logger.warning("dashboard.duplicate_officers", duplicates=duplicates)

        allegations = map_allegations(rows_for(complaint_query()))
        # the complaints query already carries the penalty column
        return list(officers.values()), allegations, None

    def _print_summary(self, store: FileStore) -> None:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("File")
        table.add_column("SHA256")
        table.add_column("Bytes")

        for persisted in store.written:
            table.add_row(persisted.name, persisted.sha256[:12], str(persisted.size))

        console.print(table)
