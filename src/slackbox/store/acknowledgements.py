"""Acknowledgement ledger of (conversation, watermark) pairs."""

import sqlite3
import time
from collections.abc import Callable

from slackbox.logging import get_logger
from slackbox.models import Acknowledgement
from slackbox.store.base import StoreComponent

logger = get_logger("store")


class AcknowledgementLedger(StoreComponent):
    """Append/delete store of read watermarks.

    Several watermarks may coexist for one conversation; the view resolves
    them with MAX at read time. Rows are never updated in place.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(conn)
        self._clock = clock

    def acknowledge(self, conversation_id: str, ts: str) -> None:
        """Record that a conversation has been read through ts.

        Acknowledging an existing pair again is a no-op. The ts is not
        checked against the conversation registry.
        """
        cursor = self._execute(
            """
            INSERT INTO acknowledgements
                (conversation_id, acknowledged_through_ts, acknowledged_at)
            VALUES (?, ?, ?)
            ON CONFLICT (conversation_id, acknowledged_through_ts) DO NOTHING
            """,
            (conversation_id, ts, int(self._clock())),
        )
        if cursor.rowcount > 0:
            logger.debug("Acknowledged conversation=%s ts=%s", conversation_id, ts)

    def unacknowledge(self, conversation_id: str, ts: str) -> None:
        """Remove the exact (conversation_id, ts) pair if it exists."""
        cursor = self._execute(
            """
            DELETE FROM acknowledgements
            WHERE conversation_id = ? AND acknowledged_through_ts = ?
            """,
            (conversation_id, ts),
        )
        if cursor.rowcount > 0:
            logger.debug("Unacknowledged conversation=%s ts=%s", conversation_id, ts)

    def list_for(self, conversation_id: str) -> list[Acknowledgement]:
        """List the ledger rows of one conversation, lowest watermark first."""
        rows = self._query(
            """
            SELECT conversation_id, acknowledged_through_ts, acknowledged_at
            FROM acknowledgements
            WHERE conversation_id = ?
            ORDER BY acknowledged_through_ts
            """,
            (conversation_id,),
        )
        return [
            Acknowledgement(
                conversation_id=row["conversation_id"],
                acknowledged_through_ts=row["acknowledged_through_ts"],
                acknowledged_at=row["acknowledged_at"],
            )
            for row in rows
        ]

    def compact(self) -> int:
        """Delete every watermark that is superseded by a higher one.

        Only the maximum acknowledged_through_ts per conversation is kept.
        Resolved watermarks, and therefore the unread view, are unchanged.

        Returns:
            Number of rows removed
        """
        cursor = self._execute(
            """
            DELETE FROM acknowledgements
            WHERE acknowledged_through_ts < (
                SELECT max(a.acknowledged_through_ts)
                FROM acknowledgements a
                WHERE a.conversation_id = acknowledgements.conversation_id
            )
            """
        )
        removed = cursor.rowcount
        logger.info("Compacted acknowledgement ledger: removed=%d", removed)
        return removed
