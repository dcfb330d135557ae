from datetime import timedelta

import pytest

from process_tracker.core.errors import LedgerCorruption, StorageUnavailable
from process_tracker.models import LedgerEntry
from process_tracker.storage import SqliteLedgerStore

from .conftest import T0


def _entry(identity: str = "chrome.exe", seconds: int = 0) -> LedgerEntry:
    return LedgerEntry(
        identity=identity,
        path=f"/opt/{identity}",
        cumulative_run_time_seconds=seconds,
        last_updated_at=T0,
        display_name="Chrome",
        first_seen_at=T0,
    )


def test_missing_entry_returns_none(store):
    assert store.get_entry("nothing") is None


def test_entries_survive_reopen(config):
    with SqliteLedgerStore(config.database_path) as first:
        first.save_entry(_entry(seconds=42))

    with SqliteLedgerStore(config.database_path) as second:
        entry = second.get_entry("chrome.exe")

    assert entry.cumulative_run_time_seconds == 42
    assert entry.last_updated_at == T0
    assert entry.display_name == "Chrome"


def test_upsert_keeps_one_row_per_identity(store):
    store.save_entry(_entry(seconds=0))
    updated = _entry(seconds=30)
    updated.last_updated_at = T0 + timedelta(seconds=30)
    store.save_entry(updated)

    (count,) = store.connection.execute("SELECT COUNT(*) FROM process_times").fetchone()
    assert count == 1
    assert store.totals() == {"chrome.exe": 30}


def test_identity_keeps_first_seen_path(store):
    store.save_entry(_entry())
    moved = _entry(seconds=5)
    moved.path = "/elsewhere/chrome.exe"
    store.save_entry(moved)

    assert store.get_entry("chrome.exe").path == "/opt/chrome.exe"


def test_corrupt_timestamp_raises(store):
    store.save_entry(_entry())
    store.connection.execute("UPDATE process_times SET updated_at = 'yesterday-ish'")

    with pytest.raises(LedgerCorruption) as excinfo:
        store.get_entry("chrome.exe")

    assert excinfo.value.field == "updated_at"
    assert excinfo.value.identity == "chrome.exe"


def test_corrupt_running_time_raises(store):
    store.save_entry(_entry())
    store.connection.execute("UPDATE process_times SET running_time = 'lots'")

    with pytest.raises(LedgerCorruption):
        store.entries()


def test_failed_transaction_rolls_back(store):
    with pytest.raises(StorageUnavailable):
        with store.transaction():
            store.save_entry(_entry("a.exe"))
            store.connection.execute("INSERT INTO missing_table VALUES (1)")

    assert store.get_entry("a.exe") is None


def test_unopenable_database_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(StorageUnavailable):
        SqliteLedgerStore(blocker / "db.sqlite")
