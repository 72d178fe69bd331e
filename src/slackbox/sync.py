"""Sync driver: push fetched conversation snapshots into the store."""

import json
from pathlib import Path
from typing import Protocol, TypeVar

import yaml

from slackbox.logging import get_logger
from slackbox.models import AcknowledgedConversation, Conversation
from slackbox.store import WatermarkStore

logger = get_logger("sync")

T = TypeVar("T")


class ConversationSource(Protocol):
    """Anything that can fetch the current conversation snapshots."""

    def fetch_conversations(self) -> list[Conversation]: ...


class SnapshotFileSource:
    """Reads conversation snapshots from a JSON or YAML file.

    The file holds either a list of conversation mappings or a mapping with
    a "conversations" list.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def fetch_conversations(self) -> list[Conversation]:
        """Load and map every snapshot in the file.

        Raises:
            ValueError: If the file can't be parsed or holds a bad snapshot
        """
        with open(self.path, encoding="utf-8") as f:
            if self.path.suffix.lower() in (".yaml", ".yml"):
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML in {self.path}: {e}") from e
            else:
                data = json.load(f)

        if isinstance(data, dict):
            data = data.get("conversations", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of conversations in {self.path}")

        return [Conversation.from_dict(item) for item in data]


def sync_and_list_unacked(
    source: ConversationSource,
    store: WatermarkStore,
) -> list[AcknowledgedConversation]:
    """Fetch snapshots, apply them, and return the refreshed unread list.

    Any failure aborts the sync. Snapshots applied before the failure stay
    committed.

    Args:
        source: Where to fetch conversation snapshots from
        store: Open watermark store

    Returns:
        Unread conversations in display order
    """
    conversations = source.fetch_conversations()
    changed = store.upsert_many(conversations)
    unacked = store.list_unacknowledged()
    logger.info(
        "Synced conversations: fetched=%d changed=%d unread=%d",
        len(conversations),
        changed,
        len(unacked),
    )
    return unacked


def paginate(items: list[T], page: int, page_size: int) -> list[T]:
    """Return one page of items.

    Pages are zero-based. A page past the end is empty.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page < 0:
        raise ValueError(f"page must not be negative, got {page}")
    start = page * page_size
    end = min(start + page_size, len(items))
    return items[start:end]
