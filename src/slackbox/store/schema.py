"""Schema creation and version gating for the watermark store."""

import sqlite3

from slackbox.exceptions import SchemaTooNewError, StorageFailure
from slackbox.logging import get_logger
from slackbox.store.base import storage_errors

logger = get_logger("store")

SUPPORTED_SCHEMA_VERSION = 1

# singleton is always 1 regardless of version, so there is only ever one row
_VERSION_TABLE = """
    CREATE TABLE IF NOT EXISTS version (
        singleton INTEGER NOT NULL PRIMARY KEY,
        version INTEGER NOT NULL
    )
"""

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS conversations (
        id TEXT NOT NULL PRIMARY KEY,
        conversation_type TEXT NOT NULL,
        display_name TEXT NOT NULL,
        latest_msg_ts TEXT NOT NULL DEFAULT ''
    );

    CREATE TABLE IF NOT EXISTS acknowledgements (
        conversation_id TEXT NOT NULL,
        -- read up to and including this message ts
        acknowledged_through_ts TEXT NOT NULL,
        -- seconds since the epoch, store time when the ack was made
        acknowledged_at INTEGER
    );

    CREATE UNIQUE INDEX IF NOT EXISTS ack_convo_idx
        ON acknowledgements (conversation_id, acknowledged_through_ts);
"""


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the stored schema version.

    Args:
        conn: Open connection to the store

    Returns:
        Stored version number

    Raises:
        StorageFailure: If the version record is missing or unreadable
    """
    with storage_errors():
        row = conn.execute("SELECT version FROM version WHERE singleton = 1").fetchone()
    if row is None:
        raise StorageFailure("version record missing")
    return row[0]


def ensure_schema(
    conn: sqlite3.Connection,
    supported_version: int = SUPPORTED_SCHEMA_VERSION,
) -> int:
    """Create the schema if needed and refuse databases from newer builds.

    Safe to call repeatedly. The version check happens before any other
    table is touched, so a rejected database is left exactly as it was.

    Args:
        conn: Open connection to the store
        supported_version: Highest schema version this build understands

    Returns:
        The stored schema version

    Raises:
        SchemaTooNewError: If the stored version exceeds supported_version
        StorageFailure: On any SQLite error
    """
    with storage_errors():
        conn.execute(_VERSION_TABLE)
        cursor = conn.execute(
            """
            INSERT INTO version (singleton, version)
            VALUES (1, ?)
            ON CONFLICT (singleton) DO NOTHING
            """,
            (supported_version,),
        )
        conn.commit()
    if cursor.rowcount > 0:
        logger.info("Initialized schema version %d", supported_version)

    version = get_schema_version(conn)
    if version > supported_version:
        logger.error(
            "Database schema version %d is newer than supported version %d",
            version,
            supported_version,
        )
        raise SchemaTooNewError(version, supported_version)

    with storage_errors():
        conn.executescript(_SCHEMA)
    return version
