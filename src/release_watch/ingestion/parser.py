"""Feed parsers - raw feed text to Entry records."""

import re
from typing import Iterator, Optional

import feedparser
import structlog

from .interfaces import Entry, FeedParserInterface, Link
from ..config.settings import settings

logger = structlog.get_logger()


class RegexFeedParser(FeedParserInterface):
    """Minimal pattern-based RSS parser.

    Each <item> block yields one Entry. The first <title>, <link> and
    <pubDate> inside the block are taken verbatim (whitespace-trimmed); a
    missing element becomes an empty string instead of dropping the item.
    """

    ITEM_PATTERN = re.compile(r"<item>([\s\S]*?)</item>")
    FIELD_PATTERNS = {
        "title": re.compile(r"<title>([\s\S]*?)</title>"),
        "link": re.compile(r"<link>([\s\S]*?)</link>"),
        "publish_date": re.compile(r"<pubDate>([\s\S]*?)</pubDate>"),
    }

    def parse(self, text: str) -> Iterator[Entry]:
        """Lazily yield entries in source order."""
        if not text:
            return
        for match in self.ITEM_PATTERN.finditer(text):
            block = match.group(1)
            yield Entry(
                title=self._first(block, "title"),
                link=Link(self._first(block, "link")),
                publish_date=self._first(block, "publish_date"),
            )

    def _first(self, block: str, field_name: str) -> str:
        found = self.FIELD_PATTERNS[field_name].search(block)
        return found.group(1).strip() if found else ""


class StructuredFeedParser(FeedParserInterface):
    """feedparser-backed parser for feeds the pattern parser cannot read."""

    def parse(self, text: str) -> Iterator[Entry]:
        if not text:
            return
        feed = feedparser.parse(text)
        if feed.bozo:
            logger.warning("feed_parse_bozo", error=str(feed.get("bozo_exception", "")))
        for entry in feed.entries:
            yield Entry(
                title=(entry.get("title") or "").strip(),
                link=Link((entry.get("link") or "").strip()),
                publish_date=(entry.get("published") or "").strip(),
            )


PARSERS = {
    "regex": RegexFeedParser,
    "feedparser": StructuredFeedParser,
}


def build_parser(name: Optional[str] = None) -> FeedParserInterface:
    """Return the parser selected by name (defaults to settings.parser)."""
    name = name or settings.parser
    try:
        return PARSERS[name]()
    except KeyError:
        raise ValueError(f"Unknown feed parser: {name}") from None
