"""History ledger: bounded, per-target log of applied text."""

import json
import threading
from datetime import datetime, timezone

from pydantic import ValidationError

from toneguide.core.logging import get_logger
from toneguide.core.schemas_rewrite import HistoryItem
from toneguide.db.kv_store import KeyValueStore

logger = get_logger(__name__)

HISTORY_KEY = "toneguide:lastApplied"
DEFAULT_CAPACITY = 3
LOCK_POOL_SIZE = 64


class HistoryLedger:
    """
    Append-only history per target, truncated to the newest `capacity` items.

    Appends are read-modify-write. A pooled lock per target serialises appends made
    through this ledger; writers in other processes are still last-write-wins.
    """

    def __init__(self, store: KeyValueStore, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.store = store
        self.capacity = capacity
        # Fixed pool: targets hashing to the same slot share a lock
        self._locks = tuple(threading.Lock() for _ in range(LOCK_POOL_SIZE))

    def _lock_for(self, target_id: str) -> threading.Lock:
        return self._locks[hash(target_id) % len(self._locks)]

    def recent(self, target_id: str) -> list[HistoryItem]:
        """
        Load history for a target, oldest first.

        Corrupt stored data is logged and treated as empty history.

        Returns:
            At most `capacity` HistoryItems
        """
        raw = self.store.get(target_id, HISTORY_KEY)
        if not raw:
            return []

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("history must be a JSON list")
            items = [HistoryItem.model_validate(record) for record in records]
        except (ValueError, OverflowError, ValidationError) as e:
            logger.error(f"Error loading history for target {target_id}: {e}")
            return []

        return items[-self.capacity :]

    def append(
        self,
        target_id: str,
        text: str,
        dataset_version: str,
        applied_at: datetime | None = None,
    ) -> list[HistoryItem]:
        """
        Record applied text for a target and drop the oldest entries past capacity.

        Args:
            target_id: External target identifier
            text: Text that was applied
            dataset_version: Corpus version the text was generated against
            applied_at: When it was applied (defaults to now, UTC)

        Returns:
            The persisted history, oldest first
        """
        item = HistoryItem(
            text=text,
            applied_at=applied_at or datetime.now(timezone.utc),
            dataset_version=dataset_version,
        )

        with self._lock_for(target_id):
            history = self.recent(target_id)
            history.append(item)
            trimmed = history[-self.capacity :]
            payload = json.dumps([entry.model_dump(mode="json", by_alias=True) for entry in trimmed])
            self.store.set(target_id, HISTORY_KEY, payload)

        logger.info(
            f"Recorded history for target {target_id}",
            extra={"history_len": len(trimmed), "dataset_version": dataset_version},
        )
        return trimmed
