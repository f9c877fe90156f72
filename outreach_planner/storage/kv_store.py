"""
Namespaced key-value store on top of SQLAlchemy.

get() returns an existence flag plus the payload so callers can tell a
missing key from a stored empty value. Concurrent writers to the same key
race; the last write wins.
"""

from typing import Any, Generic, Optional, TypeVar
from dataclasses import dataclass

from loguru import logger
from sqlalchemy.orm import sessionmaker

from ..models.base import get_session_factory
from ..models.kv_entry import KVEntryModel

T = TypeVar("T")


@dataclass
class KVResult(Generic[T]):
    exists: bool
    data: Optional[T] = None


class KeyValueStore:
    """
    Usage:
        kv = KeyValueStore()
        kv.set("outreach-planner", "signal:index", ["sig_001"])
        result = kv.get("outreach-planner", "signal:index")
        if result.exists:
            ...
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or get_session_factory()

    def get(self, namespace: str, key: str) -> KVResult[Any]:
        db = self._session_factory()
        try:
            entry = db.get(KVEntryModel, (namespace, key))
            if entry is None:
                return KVResult(exists=False)
            return KVResult(exists=True, data=entry.value)
        finally:
            db.close()

    def set(self, namespace: str, key: str, value: Any) -> None:
        db = self._session_factory()
        try:
            db.merge(KVEntryModel(namespace=namespace, key=key, value=value))
            db.commit()
            logger.debug(f"KV set {namespace}:{key}")
        except Exception as e:
            logger.error(f"Error writing {namespace}:{key}: {e}")
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, namespace: str, key: str) -> None:
        db = self._session_factory()
        try:
            entry = db.get(KVEntryModel, (namespace, key))
            if entry is not None:
                db.delete(entry)
                db.commit()
                logger.debug(f"KV delete {namespace}:{key}")
        except Exception as e:
            logger.error(f"Error deleting {namespace}:{key}: {e}")
            db.rollback()
            raise
        finally:
            db.close()
