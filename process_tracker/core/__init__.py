"""Core utilities for Process Tracker."""

from __future__ import annotations

from .config import APP_ID, APP_NAME, TrackerConfig, load_config, parse_duration
from .errors import (
    ConfigurationInvalid,
    LedgerCorruption,
    ProcessTrackerError,
    ProviderUnavailable,
    StorageUnavailable,
)
from .log_config import setup_logging

__all__ = [
    "APP_ID",
    "APP_NAME",
    "ConfigurationInvalid",
    "LedgerCorruption",
    "ProcessTrackerError",
    "ProviderUnavailable",
    "StorageUnavailable",
    "TrackerConfig",
    "load_config",
    "parse_duration",
    "setup_logging",
]
