"""Global configuration values for the Process Tracker application."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from .errors import ConfigurationInvalid

APP_NAME = "Process Tracker"
APP_ID = "process_tracker"
DATABASE_FILENAME = "db.sqlite"

MIN_INTERVAL_SECONDS = 1
MAX_INTERVAL_SECONDS = 3600
DEFAULT_INTERVAL = timedelta(seconds=10)

IGNORED_PROCESSES: tuple[str, ...] = (
    "mbamtray.exe",  # spell-checker:disable-line
    "NVIDIA Share.exe",
)

IGNORED_PATHS: tuple[str, ...] = (
    "C:\\Windows",
    "/usr/lib/systemd",
    "/usr/libexec",
    "/usr/sbin",
    "/sbin",
    "/System/Library",
)

DISPLAY_NAME_OVERRIDES: tuple[tuple[str, str], ...] = (
    ("Spotify.exe", "Spotify"),
    ("datagrip64.exe", "DataGrip"),  # spell-checker:disable-line
)

_DURATION_UNITS = {
    "ms": 0.001,
    "msec": 0.001,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
}
_DURATION_TOKEN = re.compile(r"(\d+)\s*([a-z]+)")


def _default_data_dir() -> Path:
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base) / "ProcessTracker"
    return Path.home() / ".process_tracker"


def parse_duration(text: str) -> timedelta:
    """Parse a humantime-style duration such as ``10s``, ``1m 30s`` or ``90``."""

    cleaned = text.strip().lower()
    if not cleaned:
        raise ConfigurationInvalid("Empty duration")
    if cleaned.isdigit():
        return timedelta(seconds=int(cleaned))

    total = 0.0
    position = 0
    for match in _DURATION_TOKEN.finditer(cleaned):
        if cleaned[position:match.start()].strip():
            raise ConfigurationInvalid(f"'{text}' is not a valid duration")
        value, unit = match.groups()
        if unit not in _DURATION_UNITS:
            raise ConfigurationInvalid(f"Unknown duration unit '{unit}' in '{text}'")
        total += int(value) * _DURATION_UNITS[unit]
        position = match.end()
    if position == 0 or cleaned[position:].strip():
        raise ConfigurationInvalid(f"'{text}' is not a valid duration")
    return timedelta(seconds=total)


def validate_interval(interval: timedelta) -> timedelta:
    seconds = interval.total_seconds()
    if seconds != int(seconds):
        raise ConfigurationInvalid(f"PT_INTERVAL must be a whole number of seconds (got {seconds}s)")
    if seconds > MAX_INTERVAL_SECONDS:
        raise ConfigurationInvalid(f"PT_INTERVAL is too large ({seconds:g}s > {MAX_INTERVAL_SECONDS}s)")
    if seconds < MIN_INTERVAL_SECONDS:
        raise ConfigurationInvalid(f"PT_INTERVAL is too small (must be at least {MIN_INTERVAL_SECONDS}s)")
    return interval


def _split_list(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class TrackerConfig:
    """Settings built once at startup and passed down to every component."""

    interval: timedelta = DEFAULT_INTERVAL
    data_dir: Path = field(default_factory=_default_data_dir)
    ignored_processes: frozenset[str] = frozenset(IGNORED_PROCESSES)
    ignored_paths: tuple[str, ...] = IGNORED_PATHS
    display_overrides: tuple[tuple[str, str], ...] = DISPLAY_NAME_OVERRIDES
    all_users: bool = False
    log_level: str = "INFO"
    log_file: Path | None = None

    def __post_init__(self) -> None:
        validate_interval(self.interval)

    @property
    def interval_seconds(self) -> float:
        return self.interval.total_seconds()

    @property
    def database_path(self) -> Path:
        return self.data_dir / DATABASE_FILENAME


def load_config(environ: Mapping[str, str] | None = None) -> TrackerConfig:
    """Build a :class:`TrackerConfig` from ``PT_*`` environment variables."""

    env = os.environ if environ is None else environ

    raw_interval = env.get("PT_INTERVAL")
    interval = parse_duration(raw_interval) if raw_interval is not None else DEFAULT_INTERVAL

    raw_log_file = env.get("PT_LOG_FILE")
    log_file = Path(raw_log_file).expanduser() if raw_log_file else None

    raw_dir = env.get("PT_DATA_DIR")
    data_dir = Path(raw_dir).expanduser() if raw_dir else _default_data_dir()

    log_level = (env.get("PT_LOG_LEVEL") or "INFO").upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationInvalid(f"PT_LOG_LEVEL '{log_level}' is not a logging level")

    return TrackerConfig(
        interval=interval,
        data_dir=data_dir,
        ignored_processes=frozenset(IGNORED_PROCESSES + _split_list(env.get("PT_IGNORED_PROCESSES"))),
        ignored_paths=IGNORED_PATHS + _split_list(env.get("PT_IGNORED_PATHS")),
        all_users=env.get("PT_ALL_USERS", "0").strip().lower() in {"1", "true", "yes"},
        log_level=log_level,
        log_file=log_file,
    )
