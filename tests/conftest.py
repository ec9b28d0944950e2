"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
import os
from pathlib import Path

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def temp_db():
    """Provide a temporary database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    # Cleanup
    try:
        os.unlink(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture
def store(temp_db):
    """Provide an EntryStore backed by a temporary database."""
    from release_watch.storage.database import EntryStore
    return EntryStore(temp_db)


@pytest.fixture
def sample_entry():
    """Provide a sample Entry."""
    from release_watch.ingestion.interfaces import Entry, Link
    return Entry(
        title="Google Ads API v17 released",
        link=Link("https://developers.google.com/google-ads/api/docs/release-notes#v17"),
        publish_date="Wed, 05 Jun 2024 16:00:00 GMT",
    )


@pytest.fixture
def feed_xml():
    """Build an RSS document from (title, link, pubDate) tuples.

    A None field leaves that element out of the item.
    """
    def build(items):
        blocks = []
        for title, link, pub_date in items:
            parts = ["<item>"]
            if title is not None:
                parts.append(f"  <title>{title}</title>")
            if link is not None:
                parts.append(f"  <link>{link}</link>")
            if pub_date is not None:
                parts.append(f"  <pubDate>{pub_date}</pubDate>")
            parts.append("</item>")
            blocks.append("\n".join(parts))
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<rss version="2.0"><channel>\n'
            "<title>Google Ads API release notes</title>\n"
            "<link>https://developers.google.com/google-ads/api/docs/release-notes</link>\n"
            + "\n".join(blocks)
            + "\n</channel></rss>"
        )
    return build
