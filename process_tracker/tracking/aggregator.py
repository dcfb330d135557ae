"""Merging of duplicate observations within one snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from process_tracker.models import AggregatedProcess, RawObservation

from .naming import normalize

logger = logging.getLogger(__name__)


def aggregate(
    observations: Iterable[RawObservation],
    namer: Callable[[str], str] = normalize,
) -> list[AggregatedProcess]:
    """Group observations by identity, counting instances and keeping the max run time.

    Path and display name come from the first observation seen for an
    identity. Output order follows first appearance but callers should not
    rely on it; use :func:`sort_by_display_name` for a stable listing.
    """

    grouped: dict[str, AggregatedProcess] = {}
    for observation in observations:
        entry = grouped.get(observation.identity)
        if entry is None:
            grouped[observation.identity] = AggregatedProcess(
                identity=observation.identity,
                display_name=namer(observation.identity),
                path=observation.path,
                instance_count=1,
                max_observed_run_time=observation.run_time_seconds,
            )
            continue
        if observation.path != entry.path:
            logger.debug(
                "Identity '%s' seen with divergent paths %s and %s; keeping the first",
                observation.identity,
                entry.path,
                observation.path,
            )
        entry.instance_count += 1
        entry.max_observed_run_time = max(entry.max_observed_run_time, observation.run_time_seconds)
    return list(grouped.values())


def sort_by_display_name(processes: Iterable[AggregatedProcess]) -> list[AggregatedProcess]:
    return sorted(processes, key=lambda p: p.display_name.lower())
