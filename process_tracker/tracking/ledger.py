"""Running-time accrual over persisted ledger entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from process_tracker.models import AggregatedProcess, LedgerEntry, LedgerState
from process_tracker.storage.sqlite_store import SqliteLedgerStore, as_utc

logger = logging.getLogger(__name__)


def _state_for_gap(elapsed_seconds: float, interval_seconds: float) -> LedgerState:
    if elapsed_seconds > 2 * interval_seconds:
        return LedgerState.STALE
    return LedgerState.ACTIVE


def credit_for(state: LedgerState, elapsed_seconds: float, interval_seconds: float) -> int:
    """Seconds to credit an identity in ``state`` for a gap of ``elapsed_seconds``.

    A stale entry is read as a relaunch (or a monitor outage) and earns
    exactly one interval. Unseen identities earn nothing on first sight.
    """

    if state is LedgerState.UNSEEN:
        return 0
    if state is LedgerState.STALE:
        return int(interval_seconds)
    return max(0, round(elapsed_seconds))


def compute_increment(elapsed_seconds: float, interval_seconds: float) -> int:
    return credit_for(_state_for_gap(elapsed_seconds, interval_seconds), elapsed_seconds, interval_seconds)


def classify(entry: LedgerEntry | None, now: datetime, interval: timedelta) -> LedgerState:
    if entry is None:
        return LedgerState.UNSEEN
    elapsed = as_utc(now) - entry.last_updated_at
    return _state_for_gap(elapsed.total_seconds(), interval.total_seconds())


class RunningTimeLedger:
    """Fold aggregated snapshots into cumulative running time per identity."""

    def __init__(self, store: SqliteLedgerStore, interval: timedelta) -> None:
        self._store = store
        self._interval = interval

    @property
    def interval(self) -> timedelta:
        return self._interval

    def state_of(self, identity: str, now: datetime) -> LedgerState:
        return classify(self._store.get_entry(identity), now, self._interval)

    def accrue(self, aggregated: AggregatedProcess, now: datetime) -> int:
        """Update and return the cumulative running time of ``aggregated``."""

        now = as_utc(now)
        with self._store.transaction():
            entry = self._store.get_entry(aggregated.identity)
            state = classify(entry, now, self._interval)
            if state is LedgerState.UNSEEN:
                entry = LedgerEntry(
                    identity=aggregated.identity,
                    path=aggregated.path,
                    cumulative_run_time_seconds=0,
                    last_updated_at=now,
                    display_name=aggregated.display_name,
                    first_seen_at=now,
                    last_instance_count=aggregated.instance_count,
                )
                logger.info("Tracking new process %s (%s)", aggregated.display_name, aggregated.path)
            else:
                elapsed = (now - entry.last_updated_at).total_seconds()
                increment = credit_for(state, elapsed, self._interval.total_seconds())
                if state is LedgerState.STALE:
                    logger.debug(
                        "%s reappeared after %.0fs; crediting %ds", aggregated.identity, elapsed, increment
                    )
                entry.cumulative_run_time_seconds += increment
                entry.last_updated_at = now
                entry.display_name = aggregated.display_name
                entry.last_instance_count = aggregated.instance_count
            self._store.save_entry(entry)
        return entry.cumulative_run_time_seconds

    def accrue_all(self, processes: Iterable[AggregatedProcess], now: datetime) -> dict[str, int]:
        """Accrue a whole snapshot atomically; identities not present are left untouched."""

        totals: dict[str, int] = {}
        with self._store.transaction():
            for process in processes:
                totals[process.identity] = self.accrue(process, now)
        return totals
