"""SQLite client shared by the registry services."""

import sqlite3
import threading
from contextlib import contextmanager
from sqlite3 import Connection
from typing import Iterator


class SqliteClient:
    """SQLite database client with connection management.

    A single connection is shared between threads; every statement and
    transaction runs under one re-entrant lock, so a transaction is never
    interleaved with statements from another thread.
    """

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        self._lock = threading.RLock()
        self._connection = sqlite3.connect(
            self.connection_string,
            check_same_thread=False,
            isolation_level=None,
        )
        self._connection.execute("PRAGMA foreign_keys = ON")
        self._in_transaction = False

    @property
    def connection(self) -> Connection:
        """Get the database connection."""
        return self._connection

    def execute_query(self, query: str, params=None):
        """Execute a query and return all results.

        Outside a transaction each statement autocommits.
        """
        with self._lock:
            cursor = self._connection.cursor()
            try:
                if params:
                    cursor.execute(query, params)
                else:
                    cursor.execute(query)
                return cursor.fetchall()
            finally:
                cursor.close()

    @contextmanager
    def transaction(self, immediate: bool = True) -> Iterator["SqliteClient"]:
        """Run the enclosed statements as one atomic unit.

        Commits on normal exit, rolls back and re-raises on any exception.

        Args:
            immediate: Take the database write lock up front. Pass False for
                read-only snapshots so writers in other processes are not blocked.
        """
        with self._lock:
            if self._in_transaction:
                raise RuntimeError("Nested transactions are not supported")
            self._connection.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
            self._in_transaction = True
            try:
                yield self
            except BaseException:
                self._connection.execute("ROLLBACK")
                raise
            else:
                self._connection.execute("COMMIT")
            finally:
                self._in_transaction = False

    def close(self):
        """Close the database connection."""
        with self._lock:
            self._connection.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()
        return False
