"""
Signal store - StoredSignal records plus the signal index.

Layout inside one KV namespace:
    signal:<id>     -> StoredSignal record (camelCase JSON)
    signal:index    -> list of signal IDs, newest first, no duplicates

An ID is in the index exactly when its record exists: save() inserts it at
the front if absent, delete() filters it out. Index updates are an
unsynchronized read-modify-write on a single key.
"""

from typing import List, Optional

from loguru import logger

from .. import config
from ..core.signal import StoredSignal
from .kv_store import KeyValueStore

INDEX_KEY = "signal:index"


def signal_key(signal_id: str) -> str:
    return f"signal:{signal_id}"


class SignalStore:
    """Persists StoredSignal records and maintains the signal index"""

    def __init__(self, kv: Optional[KeyValueStore] = None, namespace: Optional[str] = None):
        self.kv = kv or KeyValueStore()
        self.namespace = namespace or config.KV_NAMESPACE

    def save(self, stored: StoredSignal) -> None:
        """Write (fully replacing) the record, then index its ID"""
        signal_id = stored.signal.id
        self.kv.set(self.namespace, signal_key(signal_id), stored.to_record())
        self._add_to_index(signal_id)

    def get(self, signal_id: str) -> Optional[StoredSignal]:
        result = self.kv.get(self.namespace, signal_key(signal_id))
        if not result.exists:
            return None
        return StoredSignal.model_validate(result.data)

    def get_index(self) -> List[str]:
        result = self.kv.get(self.namespace, INDEX_KEY)
        return list(result.data) if result.exists and result.data else []

    def list_signals(self) -> List[StoredSignal]:
        """All stored signals in index order; IDs without a record are skipped"""
        signals = []
        for signal_id in self.get_index():
            stored = self.get(signal_id)
            if stored is not None:
                signals.append(stored)
        return signals

    def delete(self, signal_id: str) -> None:
        """Remove the ID from the index, then delete its record"""
        result = self.kv.get(self.namespace, INDEX_KEY)
        if result.exists:
            remaining = [sid for sid in (result.data or []) if sid != signal_id]
            self.kv.set(self.namespace, INDEX_KEY, remaining)

        self.kv.delete(self.namespace, signal_key(signal_id))
        logger.info(f"Deleted signal {signal_id}")

    def _add_to_index(self, signal_id: str) -> None:
        signal_ids = self.get_index()

        if signal_id not in signal_ids:
            signal_ids.insert(0, signal_id)
            self.kv.set(self.namespace, INDEX_KEY, signal_ids)
