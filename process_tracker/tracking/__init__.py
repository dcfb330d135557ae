"""Snapshot filtering, aggregation and running-time accrual."""

from .aggregator import aggregate, sort_by_display_name
from .ledger import RunningTimeLedger, classify, compute_increment, credit_for
from .naming import normalize
from .relevance import filter_relevant, is_relevant

__all__ = [
    "RunningTimeLedger",
    "aggregate",
    "classify",
    "compute_increment",
    "credit_for",
    "filter_relevant",
    "is_relevant",
    "normalize",
    "sort_by_display_name",
]
