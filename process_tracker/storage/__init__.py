"""Ledger persistence."""

from .sqlite_store import SqliteLedgerStore

__all__ = ["SqliteLedgerStore"]
