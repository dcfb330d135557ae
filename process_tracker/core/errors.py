"""Error kinds raised at the tracker's failure boundaries."""

from __future__ import annotations


class ProcessTrackerError(RuntimeError):
    """Base class for every error raised by the tracker."""


class ProviderUnavailable(ProcessTrackerError):
    """The process snapshot could not be obtained; the cycle is skipped."""


class LedgerCorruption(ProcessTrackerError):
    """A persisted timestamp or numeric field could not be parsed."""

    def __init__(self, identity: str, field: str, value: object) -> None:
        super().__init__(f"Corrupt ledger field '{field}' for '{identity}': {value!r}")
        self.identity = identity
        self.field = field
        self.value = value


class ConfigurationInvalid(ProcessTrackerError):
    """Startup configuration is missing, unparseable or out of range."""


class StorageUnavailable(ProcessTrackerError):
    """A persistence read or write failed; the cycle's results are discarded."""
