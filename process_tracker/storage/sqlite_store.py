"""SQLite persistence for the running-time ledger."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from process_tracker.core.errors import LedgerCorruption, StorageUnavailable
from process_tracker.models import LedgerEntry

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS processes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        pretty_name TEXT NOT NULL,
        path TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS process_times (
        process_id INTEGER PRIMARY KEY REFERENCES processes(id) ON DELETE CASCADE,
        process_count INTEGER NOT NULL,
        running_time INTEGER NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
)

_SELECT_ENTRY = """
    SELECT p.name, p.pretty_name, p.path, p.created_at,
           t.process_count, t.running_time, t.updated_at
    FROM processes p
    JOIN process_times t ON t.process_id = p.id
"""


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_timestamp(identity: str, field: str, value: object) -> datetime:
    if not isinstance(value, str):
        raise LedgerCorruption(identity, field, value)
    try:
        return as_utc(datetime.fromisoformat(value))
    except ValueError as exc:
        raise LedgerCorruption(identity, field, value) from exc


def _parse_count(identity: str, field: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise LedgerCorruption(identity, field, value)
    return value


class SqliteLedgerStore:
    """Single-row-per-identity ledger backed by a SQLite database file."""

    def __init__(self, database_path: Path | str) -> None:
        self._path = str(database_path)
        self._depth = 0
        try:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._path, isolation_level=None, check_same_thread=False)
            self._conn.execute("PRAGMA foreign_keys = ON")
            for statement in _SCHEMA:
                self._conn.execute(statement)
        except (sqlite3.Error, OSError) as exc:
            raise StorageUnavailable(f"Could not open ledger database {self._path}: {exc}") from exc
        logger.debug("Opened ledger database %s", self._path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[SqliteLedgerStore]:
        """Run the enclosed reads and writes as one atomic unit.

        Nested calls join the outermost transaction.
        """

        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        try:
            self._conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Could not start ledger transaction: {exc}") from exc
        self._depth = 1
        try:
            yield self
            self._conn.execute("COMMIT")
        except sqlite3.Error as exc:
            self._rollback()
            raise StorageUnavailable(f"Ledger write failed: {exc}") from exc
        except BaseException:
            self._rollback()
            raise
        finally:
            self._depth = 0

    def _rollback(self) -> None:
        try:
            self._conn.execute("ROLLBACK")
        except sqlite3.Error:
            logger.warning("Rollback of ledger transaction failed", exc_info=True)

    def get_entry(self, identity: str) -> LedgerEntry | None:
        try:
            row = self._conn.execute(_SELECT_ENTRY + " WHERE p.name = ?", (identity,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Ledger read failed: {exc}") from exc
        return self._row_to_entry(row) if row else None

    def entries(self) -> list[LedgerEntry]:
        try:
            rows = self._conn.execute(_SELECT_ENTRY + " ORDER BY p.name").fetchall()
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Ledger read failed: {exc}") from exc
        return [self._row_to_entry(row) for row in rows]

    def totals(self) -> dict[str, int]:
        return {entry.identity: entry.cumulative_run_time_seconds for entry in self.entries()}

    def save_entry(self, entry: LedgerEntry) -> None:
        """Upsert the identity record and its running-time row."""

        first_seen = as_utc(entry.first_seen_at or entry.last_updated_at)
        try:
            with self.transaction():
                self._conn.execute(
                    """
                    INSERT INTO processes (name, pretty_name, path, created_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(name) DO UPDATE SET pretty_name = excluded.pretty_name
                    """,
                    (entry.identity, entry.display_name or entry.identity, entry.path, first_seen.isoformat()),
                )
                (process_id,) = self._conn.execute(
                    "SELECT id FROM processes WHERE name = ?", (entry.identity,)
                ).fetchone()
                self._conn.execute(
                    """
                    INSERT INTO process_times (process_id, process_count, running_time, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(process_id) DO UPDATE SET
                        process_count = excluded.process_count,
                        running_time = excluded.running_time,
                        updated_at = excluded.updated_at
                    """,
                    (
                        process_id,
                        entry.last_instance_count,
                        entry.cumulative_run_time_seconds,
                        as_utc(entry.last_updated_at).isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            raise StorageUnavailable(f"Ledger write failed: {exc}") from exc

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SqliteLedgerStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _row_to_entry(row: tuple) -> LedgerEntry:
        name, pretty_name, path, created_at, count, running_time, updated_at = row
        return LedgerEntry(
            identity=name,
            path=path,
            cumulative_run_time_seconds=_parse_count(name, "running_time", running_time),
            last_updated_at=_parse_timestamp(name, "updated_at", updated_at),
            display_name=pretty_name,
            first_seen_at=_parse_timestamp(name, "created_at", created_at),
            last_instance_count=_parse_count(name, "process_count", count),
        )
