"""Per-target key-value storage used by the history ledger.

The host owns the real store; keys are scoped to one target so unrelated
data on the same target never collides.
"""

import threading
from typing import Protocol

from toneguide.core.logging import get_logger

logger = get_logger(__name__)

TABLE = "target_plugin_data"


class KeyValueStore(Protocol):
    """get/set string values scoped to a target id."""

    def get(self, target_id: str, key: str) -> str | None: ...

    def set(self, target_id: str, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store; the default for dev and tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._data: dict[tuple[str, str], str] = {}

    def get(self, target_id: str, key: str) -> str | None:
        with self._lock:
            return self._data.get((target_id, key))

    def set(self, target_id: str, key: str, value: str) -> None:
        with self._lock:
            self._data[(target_id, key)] = value


class SupabaseKeyValueStore:
    """Store backed by the target_plugin_data table (unique on target_id, key)."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from toneguide.db.supabase_client import get_supabase

            self._client = get_supabase()
        return self._client

    def get(self, target_id: str, key: str) -> str | None:
        result = (
            self.client.table(TABLE)
            .select("value")
            .eq("target_id", target_id)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if result.data:
            return result.data[0].get("value")
        return None

    def set(self, target_id: str, key: str, value: str) -> None:
        self.client.table(TABLE).upsert(
            {"target_id": target_id, "key": key, "value": value},
            on_conflict="target_id,key",
        ).execute()
        logger.debug(f"Stored {key} for target {target_id}")
