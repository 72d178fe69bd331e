"""SQLite-backed conversation watermark store."""

from .acknowledgements import AcknowledgementLedger
from .conversations import ConversationRegistry
from .db import WatermarkStore
from .schema import SUPPORTED_SCHEMA_VERSION, ensure_schema, get_schema_version
from .unacked import UnackedView

__all__ = [
    "SUPPORTED_SCHEMA_VERSION",
    "AcknowledgementLedger",
    "ConversationRegistry",
    "UnackedView",
    "WatermarkStore",
    "ensure_schema",
    "get_schema_version",
]
