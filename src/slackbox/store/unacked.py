"""Derived view of conversations with unread messages."""

from slackbox.models import AcknowledgedConversation
from slackbox.store.base import StoreComponent


class UnackedView(StoreComponent):
    """Computes the unread set fresh on every call.

    Nothing is materialized; the view joins the registry against the
    maximum watermark of each conversation in the ledger.
    """

    def list_unacknowledged(self) -> list[AcknowledgedConversation]:
        """List conversations with messages newer than their watermark.

        Conversations that never had a message are excluded. Ordered by
        latest_msg_ts descending, then id ascending.

        Returns:
            Unread conversations with their resolved watermark ("" if none)
        """
        rows = self._query(
            """
            WITH latest_acknowledgements AS (
                SELECT
                    conversation_id,
                    max(acknowledged_through_ts) AS acknowledged_through_ts
                FROM acknowledgements
                GROUP BY conversation_id
            )
            SELECT
                c.id,
                c.conversation_type,
                c.display_name,
                c.latest_msg_ts,
                coalesce(a.acknowledged_through_ts, '') AS acknowledged_through_ts
            FROM conversations c
            LEFT OUTER JOIN latest_acknowledgements a
                ON c.id = a.conversation_id
            WHERE
                (a.acknowledged_through_ts IS NULL
                 OR c.latest_msg_ts > a.acknowledged_through_ts)
                AND c.latest_msg_ts <> ''
            ORDER BY
                c.latest_msg_ts DESC,
                c.id ASC
            """
        )
        return [
            AcknowledgedConversation(
                id=row["id"],
                conversation_type=row["conversation_type"],
                display_name=row["display_name"],
                latest_msg_ts=row["latest_msg_ts"],
                acknowledged_through_ts=row["acknowledged_through_ts"],
            )
            for row in rows
        ]
