"""Interface definitions for feed ingestion."""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class Link:
    """Identity key of a feed entry.

    Wraps the raw link string so it can only be compared with other links,
    never with a title or a date.
    """
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Entry:
    """A feed entry as parsed from the raw feed text."""
    title: str
    link: Link
    publish_date: str = ""  # raw pubDate text, never parsed

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "link": self.link.value,
            "publish_date": self.publish_date,
        }


class FetcherInterface:
    """Interface for feed retrieval."""

    async def fetch(self, url: Optional[str] = None) -> str:
        """Return the raw feed body, or raise FetchError."""
        raise NotImplementedError


class FeedParserInterface:
    """Interface for turning raw feed text into entries."""

    def parse(self, text: str) -> Iterator[Entry]:
        """Yield entries in the order they appear in the text."""
        raise NotImplementedError
