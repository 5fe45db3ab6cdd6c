"""CCRB misconduct records harvester."""

from .errors import DecodeError, HarvestError, TransportError
from .models import Allegation, ClosingReport, CombinedRecord, DepartureLetter, Officer, Penalty
from .pipeline import HarvestPipeline, HarvestResult
from .reconcile import combine_records, prepare_allegations, reconcile

__all__ = [
    "Allegation",
    "ClosingReport",
    "CombinedRecord",
    "DecodeError",
    "DepartureLetter",
    "HarvestError",
    "HarvestPipeline",
    "HarvestResult",
    "Officer",
    "Penalty",
    "TransportError",
    "combine_records",
    "prepare_allegations",
    "reconcile",
]
