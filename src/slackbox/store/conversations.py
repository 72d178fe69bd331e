"""Conversation registry with upsert-if-newer semantics."""

from collections.abc import Iterable

from slackbox.exceptions import DataIntegrityError
from slackbox.logging import get_logger
from slackbox.models import Conversation
from slackbox.store.base import StoreComponent

logger = get_logger("store")


class ConversationRegistry(StoreComponent):
    """One row per tracked conversation.

    A stored conversation only changes when an incoming snapshot carries a
    strictly newer latest_msg_ts, so replayed or re-ordered snapshots can
    never roll state back.
    """

    def upsert(self, conversation: Conversation) -> bool:
        """Insert a conversation, or update it if the snapshot is newer.

        Ties and older timestamps are ignored silently.

        Args:
            conversation: Snapshot from the chat service

        Returns:
            True if a row was inserted or updated, False if ignored
        """
        cursor = self._execute(
            """
            INSERT INTO conversations
                (id, conversation_type, display_name, latest_msg_ts)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (id) DO UPDATE SET
                conversation_type = excluded.conversation_type,
                display_name = excluded.display_name,
                latest_msg_ts = excluded.latest_msg_ts
            WHERE excluded.latest_msg_ts > conversations.latest_msg_ts
            """,
            (
                conversation.id,
                conversation.conversation_type,
                conversation.display_name,
                conversation.latest_msg_ts,
            ),
        )
        return cursor.rowcount > 0

    def upsert_many(self, conversations: Iterable[Conversation]) -> int:
        """Upsert each conversation in order.

        Every upsert commits on its own. If one fails the error propagates
        and the conversations before it stay applied.

        Args:
            conversations: Snapshots to apply

        Returns:
            Number of rows inserted or updated
        """
        seen = 0
        changed = 0
        for conversation in conversations:
            seen += 1
            if self.upsert(conversation):
                changed += 1
        logger.debug("Upserted conversations: seen=%d changed=%d", seen, changed)
        return changed

    def get(self, conversation_id: str) -> Conversation | None:
        """Get a conversation by id.

        Args:
            conversation_id: Chat service conversation id

        Returns:
            Conversation if found, None otherwise

        Raises:
            DataIntegrityError: If more than one row has this id
        """
        rows = self._query(
            """
            SELECT id, conversation_type, display_name, latest_msg_ts
            FROM conversations
            WHERE id = ?
            """,
            (conversation_id,),
        )
        if not rows:
            return None
        if len(rows) > 1:
            raise DataIntegrityError(f"Found duplicate conversation id {conversation_id}")
        return _row_to_conversation(rows[0])

    def list_all(self) -> list[Conversation]:
        """List every tracked conversation ordered by id."""
        rows = self._query(
            """
            SELECT id, conversation_type, display_name, latest_msg_ts
            FROM conversations
            ORDER BY id
            """
        )
        return [_row_to_conversation(row) for row in rows]


def _row_to_conversation(row) -> Conversation:
    return Conversation(
        id=row["id"],
        conversation_type=row["conversation_type"],
        display_name=row["display_name"],
        latest_msg_ts=row["latest_msg_ts"] or "",
    )
