"""Conversation and acknowledgement data models."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Conversation:
    """A tracked conversation as last observed from the chat service."""

    id: str
    conversation_type: str  # im, mpim, channel
    display_name: str
    latest_msg_ts: str = ""  # empty when no message was ever observed

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Conversation":
        """Build a conversation snapshot from a plain mapping.

        Args:
            data: Mapping with id, conversation_type, display_name and
                  optionally latest_msg_ts

        Returns:
            Conversation instance

        Raises:
            ValueError: If data is not a mapping, the id is missing or empty,
                        or id/latest_msg_ts are not strings
        """
        if not isinstance(data, dict):
            raise ValueError(f"Conversation snapshot is not a mapping: {data!r}")

        conversation_id = data.get("id")
        if not conversation_id:
            raise ValueError(f"Conversation snapshot has no id: {data!r}")
        if not isinstance(conversation_id, str):
            raise ValueError(f"Conversation id must be a string: {conversation_id!r}")

        # Timestamps are compared as text, so a number parsed from an unquoted
        # value would lose its fixed format.
        latest_msg_ts = data.get("latest_msg_ts")
        if latest_msg_ts is None:
            latest_msg_ts = ""
        if not isinstance(latest_msg_ts, str):
            raise ValueError(
                f"latest_msg_ts for {conversation_id} must be a string, got {latest_msg_ts!r}"
            )

        return cls(
            id=conversation_id,
            conversation_type=str(data.get("conversation_type", "im")),
            display_name=str(data.get("display_name", "")),
            latest_msg_ts=latest_msg_ts,
        )


@dataclass
class AcknowledgedConversation:
    """A conversation paired with its highest acknowledged watermark."""

    id: str
    conversation_type: str
    display_name: str
    latest_msg_ts: str
    acknowledged_through_ts: str = ""  # empty when never acknowledged

    @property
    def conversation(self) -> Conversation:
        return Conversation(
            id=self.id,
            conversation_type=self.conversation_type,
            display_name=self.display_name,
            latest_msg_ts=self.latest_msg_ts,
        )

    @property
    def best_linkable_ts(self) -> str:
        """Timestamp a link into the conversation should open at.

        The last read point if there is one, otherwise the newest message.
        """
        if self.acknowledged_through_ts:
            return self.acknowledged_through_ts
        return self.latest_msg_ts


@dataclass
class Acknowledgement:
    """A single watermark ledger row."""

    conversation_id: str
    acknowledged_through_ts: str
    acknowledged_at: int | None = None  # store wall clock, not message time
