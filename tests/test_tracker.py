import time

import pytest

from process_tracker.core.errors import LedgerCorruption, ProviderUnavailable, StorageUnavailable
from process_tracker.runner import ProcessTracker

from .conftest import observation


class ScriptedProvider:
    """Returns the queued snapshots in order, repeating the last one."""

    def __init__(self, *snapshots):
        self._snapshots = list(snapshots)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        item = self._snapshots[min(self.calls, len(self._snapshots)) - 1]
        if isinstance(item, Exception):
            raise item
        return list(item)


CHROME_TWICE = [observation("chrome.exe", run_time=100), observation("chrome.exe", run_time=150)]


def test_cycles_accrue_running_time(config, store, clock):
    provider = ScriptedProvider(CHROME_TWICE)
    tracker = ProcessTracker(config, store, provider=provider, clock=clock)

    first = tracker.run_cycle()
    clock.advance(10)
    second = tracker.run_cycle()

    assert first.ok and second.ok
    assert first.totals == {"chrome.exe": 0}
    assert second.totals == {"chrome.exe": 10}
    (chrome,) = second.processes
    assert chrome.display_name == "Chrome"
    assert chrome.instance_count == 2
    assert chrome.max_observed_run_time == 150


def test_irrelevant_processes_never_reach_ledger(config, store, clock):
    provider = ScriptedProvider([
        observation("chrome.exe"),
        observation("mbamtray.exe"),
        observation("svchost.exe", path="C:\\Windows\\System32\\svchost.exe"),
        observation("zombie", running=False),
    ])
    tracker = ProcessTracker(config, store, provider=provider, clock=clock)

    report = tracker.run_cycle()

    assert [p.identity for p in report.processes] == ["chrome.exe"]
    assert store.totals() == {"chrome.exe": 0}


def test_processes_are_listed_by_display_name(config, store, clock):
    provider = ScriptedProvider([observation("zoom.exe"), observation("Audacity.exe"), observation("blender.exe")])
    tracker = ProcessTracker(config, store, provider=provider, clock=clock)

    report = tracker.run_cycle()

    assert [p.display_name for p in report.processes] == ["Audacity", "Blender", "Zoom"]


def test_display_overrides_come_from_config(config, store, clock):
    provider = ScriptedProvider([observation("datagrip64.exe")])
    tracker = ProcessTracker(config, store, provider=provider, clock=clock)

    assert tracker.run_cycle().processes[0].display_name == "DataGrip"


def test_provider_failure_skips_cycle(config, store, clock):
    provider = ScriptedProvider(CHROME_TWICE, ProviderUnavailable("no snapshot"), CHROME_TWICE)
    tracker = ProcessTracker(config, store, provider=provider, clock=clock)

    tracker.run_cycle()
    clock.advance(10)
    skipped = tracker.run_cycle()
    clock.advance(10)
    resumed = tracker.run_cycle()

    assert skipped.skipped == "provider"
    assert skipped.totals == {}
    assert resumed.totals == {"chrome.exe": 20}
    diagnostics = tracker.diagnostics()
    assert diagnostics["cycles"] == 3
    assert diagnostics["skipped_cycles"] == 1
    assert diagnostics["consecutive_failures"] == 0
    assert diagnostics["last_error"]["type"] == "ProviderUnavailable"


def test_storage_failure_discards_cycle(config, store, clock, monkeypatch):
    tracker = ProcessTracker(config, store, provider=ScriptedProvider(CHROME_TWICE), clock=clock)
    tracker.run_cycle()

    def broken_save(entry):
        raise StorageUnavailable("disk full")

    with monkeypatch.context() as patch:
        patch.setattr(store, "save_entry", broken_save)
        clock.advance(10)
        failed = tracker.run_cycle()

    assert failed.skipped == "storage"
    assert failed.totals == {}
    assert store.totals() == {"chrome.exe": 0}

    clock.advance(10)
    assert tracker.run_cycle().totals == {"chrome.exe": 20}


def test_ledger_corruption_is_fatal(config, store, clock):
    tracker = ProcessTracker(config, store, provider=ScriptedProvider(CHROME_TWICE), clock=clock)
    tracker.run_cycle()
    store.connection.execute("UPDATE process_times SET updated_at = 'garbage'")

    with pytest.raises(LedgerCorruption):
        tracker.run_cycle()


def test_run_stops_after_max_cycles(config, store, clock):
    reports = []
    provider = ScriptedProvider(CHROME_TWICE)
    tracker = ProcessTracker(config, store, provider=provider, clock=clock, on_cycle=reports.append)

    tracker.run(max_cycles=1)

    assert provider.calls == 1
    assert len(reports) == 1


def test_background_thread_records_fatal_corruption(config, store, clock):
    tracker = ProcessTracker(config, store, provider=ScriptedProvider(CHROME_TWICE), clock=clock)
    tracker.run_cycle()
    store.connection.execute("UPDATE process_times SET running_time = 'oops'")

    tracker.start()
    deadline = time.monotonic() + 5
    while tracker.fatal_error is None and time.monotonic() < deadline:
        time.sleep(0.01)
    tracker.stop(timeout=5)

    assert isinstance(tracker.fatal_error, LedgerCorruption)
