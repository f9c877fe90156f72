"""SQLAlchemy base and session management"""

from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .. import config

# Base class for models
Base = declarative_base()


def make_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create an engine for the key-value store.
    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    url = database_url or config.DATABASE_URL

    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False,  # Set to True to see SQL queries
    )


@lru_cache()
def get_engine() -> Engine:
    return make_engine()


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Session factory bound to the configured database"""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db(engine: Optional[Engine] = None) -> None:
    """Initialize database tables"""
    # Register models on Base.metadata
    from . import kv_entry  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
