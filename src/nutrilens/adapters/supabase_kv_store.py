"""Supabase-backed key-value store for persisted app state."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrilens.services.profiles import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores string values in a `key`/`value` Supabase table."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under a key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()
