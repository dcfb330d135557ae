"""Models exported by Process Tracker."""

from .ledger_entry import LedgerEntry, LedgerState
from .process_info import AggregatedProcess, CycleReport, RawObservation

__all__ = [
    "AggregatedProcess",
    "CycleReport",
    "LedgerEntry",
    "LedgerState",
    "RawObservation",
]
