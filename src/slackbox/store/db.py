"""Watermark store handle owning one SQLite connection."""

import sqlite3
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Self

from slackbox.models import AcknowledgedConversation, Conversation
from slackbox.store.acknowledgements import AcknowledgementLedger
from slackbox.store.base import storage_errors
from slackbox.store.conversations import ConversationRegistry
from slackbox.store.schema import SUPPORTED_SCHEMA_VERSION, ensure_schema, get_schema_version
from slackbox.store.unacked import UnackedView


class WatermarkStore:
    """Single-file store for conversations and their read watermarks.

    Opening the store runs the schema guard; no other operation is
    possible on a store whose schema was rejected.
    """

    def __init__(
        self,
        db_path: Path,
        supported_version: int = SUPPORTED_SCHEMA_VERSION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Open (and if needed create) the store at db_path.

        Args:
            db_path: Path to SQLite database file. Parent directories
                     will be created if they don't exist.
            supported_version: Highest schema version this build accepts
            clock: Wall clock used to stamp acknowledgements

        Raises:
            SchemaTooNewError: If the file was written by a newer schema
            StorageFailure: If the file cannot be opened or initialized
        """
        self._db_path = db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        with storage_errors():
            self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self.supported_version = supported_version
        try:
            ensure_schema(self._conn, supported_version)
        except Exception:
            self._conn.close()
            raise

        self.conversations = ConversationRegistry(self._conn)
        self.acknowledgements = AcknowledgementLedger(self._conn, clock=clock)
        self.unacked = UnackedView(self._conn)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def schema_version(self) -> int:
        return get_schema_version(self._conn)

    def upsert(self, conversation: Conversation) -> bool:
        return self.conversations.upsert(conversation)

    def upsert_many(self, conversations: Iterable[Conversation]) -> int:
        return self.conversations.upsert_many(conversations)

    def get(self, conversation_id: str) -> Conversation | None:
        return self.conversations.get(conversation_id)

    def acknowledge(self, conversation_id: str, ts: str) -> None:
        self.acknowledgements.acknowledge(conversation_id, ts)

    def unacknowledge(self, conversation_id: str, ts: str) -> None:
        self.acknowledgements.unacknowledge(conversation_id, ts)

    def list_unacknowledged(self) -> list[AcknowledgedConversation]:
        return self.unacked.list_unacknowledged()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> Self:
        """Enter context manager."""
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Exit context manager, closing database connection."""
        self.close()
