"""Persisted running-time ledger records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class LedgerState(str, Enum):
    UNSEEN = "unseen"
    ACTIVE = "active"
    STALE = "stale"


@dataclass(slots=True)
class LedgerEntry:
    identity: str
    path: str
    cumulative_run_time_seconds: int
    last_updated_at: datetime
    display_name: str = ""
    first_seen_at: datetime | None = None
    last_instance_count: int = 1
