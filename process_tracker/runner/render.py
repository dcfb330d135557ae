"""Plain-text listing of a tracking cycle."""

from __future__ import annotations

from datetime import timedelta

from process_tracker.models import CycleReport

CLEAR_TERMINAL = "\x1b[2J\x1b[1;1H"

_UNITS = (
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


def format_duration(seconds: float | timedelta) -> str:
    if isinstance(seconds, timedelta):
        seconds = seconds.total_seconds()
    remaining = max(0, int(seconds))
    if remaining == 0:
        return "0s"
    parts = []
    for suffix, size in _UNITS:
        value, remaining = divmod(remaining, size)
        if value:
            parts.append(f"{value}{suffix}")
    return " ".join(parts)


def render_cycle(report: CycleReport, interval: timedelta, clear: bool = True) -> str:
    lines = []
    if report.skipped:
        lines.append(f"Cycle skipped ({report.skipped}). Retrying in {format_duration(interval)}")
    else:
        lines.append(f"Found {len(report.processes)} processes. Updating in {format_duration(interval)}")
        for process in report.processes:
            total = report.totals.get(process.identity, 0)
            lines.append(f"- {process.display_name} (x{process.instance_count}) {format_duration(total)}")
    text = "\n".join(lines)
    return CLEAR_TERMINAL + text if clear else text
