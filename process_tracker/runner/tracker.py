"""Poll loop tying the provider, aggregator and ledger together."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone
from functools import partial
from typing import Any

from process_tracker.core.config import TrackerConfig
from process_tracker.core.errors import LedgerCorruption, ProviderUnavailable, StorageUnavailable
from process_tracker.data import collect_raw_observations
from process_tracker.models import CycleReport, RawObservation
from process_tracker.storage import SqliteLedgerStore
from process_tracker.tracking import (
    RunningTimeLedger,
    aggregate,
    filter_relevant,
    normalize,
    sort_by_display_name,
)

logger = logging.getLogger(__name__)

Provider = Callable[[], list[RawObservation]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProcessTracker:
    """Runs one snapshot-to-ledger cycle per polling interval."""

    def __init__(
        self,
        config: TrackerConfig,
        store: SqliteLedgerStore,
        provider: Provider | None = None,
        clock: Callable[[], datetime] = _utcnow,
        on_cycle: Callable[[CycleReport], None] | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._provider = provider or partial(collect_raw_observations, all_users=config.all_users)
        self._clock = clock
        self._on_cycle = on_cycle
        self._ledger = RunningTimeLedger(store, config.interval)
        self._namer = partial(normalize, overrides=config.display_overrides)

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._fatal_error: LedgerCorruption | None = None
        self._diagnostics: dict[str, Any] = {
            "cycles": 0,
            "skipped_cycles": 0,
            "last_run_duration": 0.0,
            "last_success_at": None,
            "consecutive_failures": 0,
            "last_error": None,
        }

    @property
    def ledger(self) -> RunningTimeLedger:
        return self._ledger

    @property
    def fatal_error(self) -> LedgerCorruption | None:
        return self._fatal_error

    def diagnostics(self) -> dict[str, Any]:
        return dict(self._diagnostics)

    def run_cycle(self, now: datetime | None = None) -> CycleReport:
        """Snapshot, filter, aggregate and accrue once.

        Provider and storage failures drop the cycle; ledger corruption is raised.
        """

        started = time.perf_counter()
        try:
            observations = self._provider()
        except ProviderUnavailable as exc:
            logger.warning("Process snapshot unavailable, skipping cycle: %s", exc)
            return self._finish(CycleReport(timestamp=now or self._clock(), skipped="provider"), started, exc)

        timestamp = now or self._clock()
        processes = sort_by_display_name(aggregate(filter_relevant(observations, self._config), self._namer))
        report = CycleReport(timestamp=timestamp, processes=processes)
        try:
            report.totals = self._ledger.accrue_all(processes, timestamp)
        except StorageUnavailable as exc:
            logger.error("Could not persist running times, discarding cycle: %s", exc)
            report.totals = {}
            report.skipped = "storage"
            return self._finish(report, started, exc)
        return self._finish(report, started)

    def run(self, max_cycles: int | None = None) -> None:
        """Run cycles in the calling thread until stopped or ``max_cycles`` is reached."""

        completed = 0
        while not self._stop.is_set():
            start_time = time.perf_counter()
            report = self.run_cycle()
            if self._on_cycle is not None:
                self._on_cycle(report)
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            elapsed = time.perf_counter() - start_time
            delay = max(0.1, self._config.interval_seconds - elapsed)
            self._stop.wait(delay)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_guarded, name="ProcessTracker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread and thread.is_alive():
            thread.join(timeout=timeout)
        self._thread = None

    def _run_guarded(self) -> None:
        try:
            self.run()
        except LedgerCorruption as exc:
            logger.exception("Ledger is corrupt, stopping tracker")
            self._fatal_error = exc
            self._stop.set()

    def _finish(self, report: CycleReport, started: float, error: Exception | None = None) -> CycleReport:
        duration = time.perf_counter() - started
        self._diagnostics["cycles"] += 1
        self._diagnostics["last_run_duration"] = duration
        if error is None:
            self._diagnostics["last_success_at"] = report.timestamp
            self._diagnostics["consecutive_failures"] = 0
            logger.debug("Cycle tracked %d processes in %.3fs", len(report.processes), duration)
        else:
            self._diagnostics["skipped_cycles"] += 1
            self._diagnostics["consecutive_failures"] += 1
            self._diagnostics["last_error"] = {
                "message": str(error),
                "type": error.__class__.__name__,
                "timestamp": report.timestamp,
            }
        return report
