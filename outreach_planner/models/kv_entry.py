"""Key-value entry database model"""

from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.sql import func
from .base import Base


class KVEntryModel(Base):
    """
    One JSON value stored under (namespace, key).
    Writes replace the whole value; there is no merge or versioning.
    """

    __tablename__ = "kv_entries"

    namespace = Column(String, primary_key=True)
    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self):
        return f"<KVEntry {self.namespace}:{self.key}>"
