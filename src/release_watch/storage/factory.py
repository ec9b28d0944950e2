"""Factory functions to create storage instances.

The database URL comes from DATABASE_URL when the hosting platform sets
it, otherwise from RW_DATABASE_URL / settings (SQLite by default).
"""

import os
from functools import lru_cache

import structlog

logger = structlog.get_logger()


def get_database_url() -> str:
    """Get database URL from environment, with fallback to SQLite."""
    # Check for DATABASE_URL first (standard for cloud platforms)
    url = os.environ.get('DATABASE_URL')
    if url:
        return url

    # Default to settings (RW_DATABASE_URL or local SQLite)
    from ..config.settings import settings
    return settings.database_url


@lru_cache(maxsize=1)
def get_entry_store():
    """Get the entry store for the configured database."""
    from .database import EntryStore

    url = get_database_url()
    logger.info("using_entry_store", url=url[:40] + "...")
    return EntryStore(url)


def clear_cache():
    """Clear cached instances (useful for testing)."""
    get_entry_store.cache_clear()
