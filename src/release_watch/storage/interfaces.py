"""Interface definitions for entry storage."""

from dataclasses import dataclass
from typing import List, Optional

from ..ingestion.interfaces import Entry, Link


@dataclass(frozen=True)
class StoredEntry:
    """A persisted, deduplicated feed entry."""
    title: str
    link: Link
    publish_date: str
    last_seen: str  # ISO-8601 UTC, fixed when the row is created
    id: Optional[int] = None

    @classmethod
    def from_entry(cls, entry: Entry, last_seen: str) -> "StoredEntry":
        return cls(
            title=entry.title,
            link=entry.link,
            publish_date=entry.publish_date,
            last_seen=last_seen,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link.value,
            "publish_date": self.publish_date,
            "last_seen": self.last_seen,
        }


class StorageInterface:
    """Interface for entry storage."""

    def list_all(self) -> List[StoredEntry]:
        """Return every stored entry in insertion order."""
        raise NotImplementedError

    def insert(self, entry: StoredEntry) -> int:
        """Append one entry and return its id. Raises StorageError."""
        raise NotImplementedError
