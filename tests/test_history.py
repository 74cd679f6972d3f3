"""Tests for the per-target history ledger."""

import json
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from toneguide.db.history import HISTORY_KEY, LOCK_POOL_SIZE, HistoryLedger
from toneguide.db.kv_store import InMemoryKeyValueStore, SupabaseKeyValueStore

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def ledger(store) -> HistoryLedger:
    return HistoryLedger(store)


def _append_texts(ledger: HistoryLedger, target_id: str, texts: list[str]) -> None:
    for i, text in enumerate(texts):
        ledger.append(target_id, text, "v1.3", applied_at=T0 + timedelta(minutes=i))


class TestHistoryLedger:
    """Tests for append/recent semantics."""

    def test_empty_history(self, ledger) -> None:
        """Unknown targets have no history."""
        assert ledger.recent("42") == []

    def test_append_and_read_back(self, ledger) -> None:
        """Appended items come back with text, timestamp and dataset version."""
        ledger.append("42", "Get started", "v1.3", applied_at=T0)

        items = ledger.recent("42")
        assert len(items) == 1
        assert items[0].text == "Get started"
        assert items[0].applied_at == T0
        assert items[0].dataset_version == "v1.3"

    def test_fourth_append_evicts_oldest(self, ledger) -> None:
        """[A, B, C] + D -> [B, C, D]."""
        _append_texts(ledger, "42", ["A", "B", "C"])

        result = ledger.append("42", "D", "v1.3", applied_at=T0 + timedelta(minutes=9))

        assert [i.text for i in result] == ["B", "C", "D"]
        assert [i.text for i in ledger.recent("42")] == ["B", "C", "D"]

    def test_never_exceeds_capacity(self, ledger, store) -> None:
        """Stored list stays at three entries, oldest to newest."""
        _append_texts(ledger, "42", [f"text {i}" for i in range(10)])

        stored = json.loads(store.get("42", HISTORY_KEY))
        assert len(stored) == 3
        assert [s["text"] for s in stored] == ["text 7", "text 8", "text 9"]

    def test_targets_are_independent(self, ledger) -> None:
        """History is keyed per target."""
        _append_texts(ledger, "1", ["A"])
        _append_texts(ledger, "2", ["B", "C"])

        assert [i.text for i in ledger.recent("1")] == ["A"]
        assert [i.text for i in ledger.recent("2")] == ["B", "C"]

    def test_custom_capacity(self, store) -> None:
        """Capacity is configurable."""
        ledger = HistoryLedger(store, capacity=2)
        _append_texts(ledger, "42", ["A", "B", "C"])

        assert [i.text for i in ledger.recent("42")] == ["B", "C"]

    def test_invalid_capacity(self, store) -> None:
        """Capacity must be positive."""
        with pytest.raises(ValueError):
            HistoryLedger(store, capacity=0)

    def test_stored_format(self, ledger, store) -> None:
        """Entries are stored as {text, ts (epoch ms), datasetVersion} under a namespaced key."""
        ledger.append("42", "Save", "v1.3", applied_at=T0)

        stored = json.loads(store.get("42", HISTORY_KEY))
        assert stored == [{"text": "Save", "ts": int(T0.timestamp() * 1000), "datasetVersion": "v1.3"}]
        assert HISTORY_KEY.startswith("toneguide:")

    def test_reads_legacy_records(self, store, ledger) -> None:
        """Records written by the host in the same shape are readable."""
        store.set("42", HISTORY_KEY, json.dumps([{"text": "Old", "ts": 1700000000000, "datasetVersion": "v1.2"}]))

        items = ledger.recent("42")
        assert items[0].text == "Old"
        assert items[0].dataset_version == "v1.2"

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            json.dumps({"text": "x"}),
            json.dumps([{"ts": 1}]),
            '[{"text": "a", "ts": Infinity, "datasetVersion": "v1.3"}]',
            '[{"text": "a", "ts": 1e300, "datasetVersion": "v1.3"}]',
        ],
    )
    def test_corrupt_history_is_empty(self, store, ledger, raw) -> None:
        """Corrupt stored data reads as empty and is replaced on the next append."""
        store.set("42", HISTORY_KEY, raw)

        assert ledger.recent("42") == []
        assert [i.text for i in ledger.append("42", "New", "v1.3")] == ["New"]

    def test_concurrent_appends_same_target(self, ledger) -> None:
        """Appends through one ledger are serialised per target."""
        threads = [
            threading.Thread(target=ledger.append, args=("42", f"t{i}", "v1.3")) for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ledger.recent("42")) == 3

    def test_lock_pool_is_bounded(self, ledger) -> None:
        """Locks come from a fixed pool however many targets are seen."""
        locks = {id(ledger._lock_for(f"target-{i}")) for i in range(1000)}

        assert len(locks) <= LOCK_POOL_SIZE
        assert ledger._lock_for("42") is ledger._lock_for("42")


class TestSupabaseKeyValueStore:
    """Tests for the Supabase-backed store with a mocked client."""

    def test_get_returns_value(self) -> None:
        """Should select by target and key."""
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.eq.return_value
        query.limit.return_value.execute.return_value = MagicMock(data=[{"value": "[]"}])

        assert SupabaseKeyValueStore(client).get("42", HISTORY_KEY) == "[]"
        client.table.assert_called_with("target_plugin_data")

    def test_get_missing_returns_none(self) -> None:
        """No row means no value."""
        client = MagicMock()
        query = client.table.return_value.select.return_value.eq.return_value.eq.return_value
        query.limit.return_value.execute.return_value = MagicMock(data=[])

        assert SupabaseKeyValueStore(client).get("42", HISTORY_KEY) is None

    def test_set_upserts(self) -> None:
        """Should upsert on (target_id, key)."""
        client = MagicMock()

        SupabaseKeyValueStore(client).set("42", HISTORY_KEY, "[]")

        client.table.return_value.upsert.assert_called_once_with(
            {"target_id": "42", "key": HISTORY_KEY, "value": "[]"},
            on_conflict="target_id,key",
        )
