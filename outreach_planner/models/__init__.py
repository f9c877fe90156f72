"""SQLAlchemy database models"""

from .base import Base
from .kv_entry import KVEntryModel

__all__ = ["Base", "KVEntryModel"]
