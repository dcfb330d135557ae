"""Filtering of observations that are not user-relevant."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from process_tracker.core.config import TrackerConfig
from process_tracker.models import RawObservation


def is_relevant(
    record: RawObservation,
    ignored_names: Collection[str],
    ignored_path_prefixes: Iterable[str],
) -> bool:
    if not record.path or not record.is_running:
        return False
    if record.identity in ignored_names:
        return False
    return not any(record.path.startswith(prefix) for prefix in ignored_path_prefixes)


def filter_relevant(records: Iterable[RawObservation], config: TrackerConfig) -> list[RawObservation]:
    return [
        record
        for record in records
        if is_relevant(record, config.ignored_processes, config.ignored_paths)
    ]
