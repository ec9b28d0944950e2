"""Feed ingestion - fetching and parsing the release notes feed."""

from .interfaces import Entry, Link, FetcherInterface, FeedParserInterface
from .fetcher import FeedFetcher
from .parser import RegexFeedParser, StructuredFeedParser, build_parser

__all__ = [
    "Entry", "Link", "FetcherInterface", "FeedParserInterface",
    "FeedFetcher", "RegexFeedParser", "StructuredFeedParser", "build_parser",
]
