#!/usr/bin/env python3
"""
Initialize the key-value store schema.

Usage:
    python scripts/init_db.py
    DATABASE_URL=postgresql://... python scripts/init_db.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from outreach_planner import config
from outreach_planner.models.base import get_engine, init_db


def init_database():
    """Create the kv_entries table if it does not exist"""

    logger.info(f"Creating database tables on {get_engine().url.render_as_string(hide_password=True)}...")

    init_db()

    logger.info(f"Tables created successfully (namespace: {config.KV_NAMESPACE})")
    logger.info("Database initialization complete!")


if __name__ == "__main__":
    init_database()
