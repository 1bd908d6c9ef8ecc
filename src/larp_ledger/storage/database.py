from __future__ import annotations

import contextlib
import importlib
import logging
import pathlib
import sqlite3
import threading
from typing import Generator

logger = logging.getLogger(__name__)

_MIGRATIONS = [
    "001_initial",
    "002_characters",
    "003_events",
    "004_candles_settings",
    "005_entry_kinds",
]


class Database:
    """Main database manager for the ledger storage layer.

    One shared connection is used by every thread; ``get_connection`` blocks
    hold a re-entrant lock for their whole transaction, so a read-then-write
    inside one block cannot interleave with another writer.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None
        self._lock = threading.RLock()
        self._depth = 0
        if db_path != ":memory:":
            pathlib.Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    def initialize(self) -> None:
        """Run migrations to create all tables, skipping already-applied ones."""
        with self._lock:
            conn = self._get_raw_connection()
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_version "
                "(version INTEGER PRIMARY KEY)"
            )
            applied = {
                r[0] for r in conn.execute("SELECT version FROM schema_version").fetchall()
            }
            for i, name in enumerate(_MIGRATIONS, 1):
                if i not in applied:
                    mod = importlib.import_module(f"larp_ledger.storage.migrations.{name}")
                    mod.upgrade(conn)
                    conn.execute("INSERT INTO schema_version VALUES (?)", (i,))
                    logger.info("Applied migration %s", name)
            conn.commit()

    def _get_raw_connection(self) -> sqlite3.Connection:
        """Return the shared connection, creating it if needed."""
        if self._connection is None:
            self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA journal_mode=WAL")
            self._connection.execute("PRAGMA foreign_keys=ON")
        return self._connection

    @contextlib.contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager that yields a database connection.

        Commits on success, rolls back on exception. Nested blocks join the
        outermost transaction.
        """
        with self._lock:
            conn = self._get_raw_connection()
            self._depth += 1
            try:
                yield conn
            except Exception:
                self._depth -= 1
                if self._depth == 0:
                    conn.rollback()
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
