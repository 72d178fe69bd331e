"""Shared helpers for the SQLite-backed store components."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from slackbox.exceptions import StorageFailure


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise any sqlite3 error as StorageFailure, keeping its message."""
    try:
        yield
    except sqlite3.Error as e:
        raise StorageFailure(str(e)) from e


class StoreComponent:
    """Base for components that share one owned SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Run a single mutating statement and commit it."""
        with storage_errors():
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
        return cursor

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with storage_errors():
            return self._conn.execute(sql, params).fetchall()
