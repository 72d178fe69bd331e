"""Tests for the sync driver."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from slackbox.exceptions import StorageFailure
from slackbox.models import Conversation
from slackbox.store import WatermarkStore
from slackbox.sync import SnapshotFileSource, paginate, sync_and_list_unacked


@pytest.fixture
def snapshots() -> list[dict]:
    return [
        {"id": "D1", "conversation_type": "im", "display_name": "Alice", "latest_msg_ts": "2.0000"},
        {"id": "D2", "conversation_type": "im", "display_name": "Bob", "latest_msg_ts": "3.0000"},
        {"id": "D3", "conversation_type": "im", "display_name": "Carol", "latest_msg_ts": ""},
    ]


class TestSnapshotFileSource:
    """Tests for reading snapshot files."""

    def test_reads_json_list(self, tmp_path: Path, snapshots: list[dict]) -> None:
        """A JSON list of mappings should be parsed into conversations."""
        path = tmp_path / "snap.json"
        path.write_text(json.dumps(snapshots))

        result = SnapshotFileSource(path).fetch_conversations()
        assert [c.id for c in result] == ["D1", "D2", "D3"]
        assert result[0] == Conversation("D1", "im", "Alice", "2.0000")

    def test_reads_wrapped_yaml(self, tmp_path: Path) -> None:
        """A YAML mapping with a conversations key should be accepted."""
        path = tmp_path / "snap.yaml"
        path.write_text(
            "conversations:\n"
            "  - id: D1\n"
            "    display_name: Alice\n"
            "    latest_msg_ts: '1.0000'\n"
        )

        result = SnapshotFileSource(path).fetch_conversations()
        assert result == [Conversation("D1", "im", "Alice", "1.0000")]

    def test_unquoted_yaml_ts_rejected(self, tmp_path: Path) -> None:
        """An unquoted YAML ts parses as a float and must not be stored."""
        path = tmp_path / "snap.yaml"
        path.write_text("- id: D1\n  latest_msg_ts: 1700000000.000100\n")

        with pytest.raises(ValueError, match="must be a string"):
            SnapshotFileSource(path).fetch_conversations()

    def test_quoted_yaml_ts_kept_verbatim(self, tmp_path: Path) -> None:
        path = tmp_path / "snap.yaml"
        path.write_text("- id: D1\n  latest_msg_ts: '1700000000.000100'\n")

        [c] = SnapshotFileSource(path).fetch_conversations()
        assert c.latest_msg_ts == "1700000000.000100"

    def test_unquoted_json_ts_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "snap.json"
        path.write_text('[{"id": "D1", "latest_msg_ts": 1700000000.000100}]')

        with pytest.raises(ValueError, match="must be a string"):
            SnapshotFileSource(path).fetch_conversations()

    def test_malformed_yaml_is_value_error(self, tmp_path: Path) -> None:
        """YAML parse errors should surface as ValueError."""
        path = tmp_path / "snap.yaml"
        path.write_text("- id: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            SnapshotFileSource(path).fetch_conversations()

    def test_non_mapping_item_is_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "snap.json"
        path.write_text(json.dumps(["D1"]))

        with pytest.raises(ValueError, match="not a mapping"):
            SnapshotFileSource(path).fetch_conversations()

    def test_rejects_non_list(self, tmp_path: Path) -> None:
        """Anything other than a list of conversations is an error."""
        path = tmp_path / "snap.json"
        path.write_text(json.dumps("nope"))

        with pytest.raises(ValueError, match="Expected a list"):
            SnapshotFileSource(path).fetch_conversations()


class TestSyncAndListUnacked:
    """Tests for sync_and_list_unacked."""

    def test_upserts_and_lists(self, store: WatermarkStore, tmp_path: Path, snapshots: list[dict]) -> None:
        """Syncing should store snapshots and return the unread list."""
        path = tmp_path / "snap.json"
        path.write_text(json.dumps(snapshots))

        unacked = sync_and_list_unacked(SnapshotFileSource(path), store)

        assert [c.id for c in unacked] == ["D2", "D1"]
        assert store.get("D3") is not None

    def test_resync_respects_acks(self, store: WatermarkStore) -> None:
        """A replayed snapshot shouldn't resurface an acknowledged conversation."""
        source = MagicMock()
        source.fetch_conversations.return_value = [Conversation("D1", "im", "Alice", "1.0")]

        sync_and_list_unacked(source, store)
        store.acknowledge("D1", "1.0")

        assert sync_and_list_unacked(source, store) == []

    def test_fetch_failure_propagates(self, store: WatermarkStore) -> None:
        """A failing source should abort the sync without touching the store."""
        source = MagicMock()
        source.fetch_conversations.side_effect = ConnectionError("api down")

        with pytest.raises(ConnectionError):
            sync_and_list_unacked(source, store)
        assert store.conversations.list_all() == []

    def test_store_failure_propagates(self, store: WatermarkStore) -> None:
        """A storage error mid-batch should propagate to the driver."""
        source = MagicMock()
        source.fetch_conversations.return_value = [
            Conversation("D1", "im", "Alice", "1.0"),
            Conversation("D2", "im", None, "1.0"),  # type: ignore[arg-type]
        ]

        with pytest.raises(StorageFailure):
            sync_and_list_unacked(source, store)
        assert store.get("D1") is not None


class TestPaginate:
    """Tests for paginate."""

    def test_first_page(self) -> None:
        assert paginate([1, 2, 3, 4, 5], 0, 2) == [1, 2]

    def test_last_partial_page(self) -> None:
        assert paginate([1, 2, 3, 4, 5], 2, 2) == [5]

    def test_past_end_is_empty(self) -> None:
        assert paginate([1, 2, 3], 5, 2) == []

    def test_rejects_bad_arguments(self) -> None:
        with pytest.raises(ValueError):
            paginate([1], 0, 0)
        with pytest.raises(ValueError):
            paginate([1], -1, 2)
