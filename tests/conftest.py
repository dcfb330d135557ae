"""Shared fixtures for the tracker tests."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from process_tracker.core.config import TrackerConfig
from process_tracker.models import RawObservation
from process_tracker.storage import SqliteLedgerStore

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def observation(identity: str, path: str | None = None, run_time: int = 0, running: bool = True) -> RawObservation:
    return RawObservation(
        identity=identity,
        path=f"C:\\Programs\\{identity}" if path is None else path,
        is_running=running,
        run_time_seconds=run_time,
    )


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def config(tmp_path) -> TrackerConfig:
    return TrackerConfig(interval=timedelta(seconds=10), data_dir=tmp_path)


@pytest.fixture
def store(config):
    ledger_store = SqliteLedgerStore(config.database_path)
    yield ledger_store
    ledger_store.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger("process_tracker")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
