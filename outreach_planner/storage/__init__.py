"""Key-value persistence for processed signals"""

from .kv_store import KeyValueStore, KVResult
from .signal_store import SignalStore

__all__ = ["KeyValueStore", "KVResult", "SignalStore"]
