"""Database storage and models."""

from .interfaces import StoredEntry, StorageInterface
from .database import EntryStore
from .models import ReleaseNoteModel, init_db
from .factory import get_entry_store

__all__ = [
    "StoredEntry", "StorageInterface", "EntryStore",
    "ReleaseNoteModel", "init_db", "get_entry_store",
]
