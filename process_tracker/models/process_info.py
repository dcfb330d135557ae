"""Process data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class RawObservation:
    identity: str
    path: str
    is_running: bool
    run_time_seconds: int


@dataclass(slots=True)
class AggregatedProcess:
    """One logical entry per distinct identity observed in a snapshot."""

    identity: str
    display_name: str
    path: str
    instance_count: int = 1
    max_observed_run_time: int = 0


@dataclass(slots=True)
class CycleReport:
    timestamp: datetime
    processes: list[AggregatedProcess] = field(default_factory=list)
    totals: dict[str, int] = field(default_factory=dict)
    skipped: str | None = None

    @property
    def ok(self) -> bool:
        return self.skipped is None
