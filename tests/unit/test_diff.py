"""Unit tests for the entry diff."""

# Add src to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from release_watch.ingestion.interfaces import Entry, Link
from release_watch.pipeline.diff import diff_entries, known_links
from release_watch.storage.interfaces import StoredEntry


def _entry(key: str, title: str = None, date: str = "d") -> Entry:
    return Entry(title=title or key.upper(), link=Link(f"https://example.com/{key}"), publish_date=date)


def _stored(key: str) -> StoredEntry:
    return StoredEntry(
        title=key.upper(),
        link=Link(f"https://example.com/{key}"),
        publish_date="d",
        last_seen="2024-01-01T00:00:00+00:00",
        id=1,
    )


class TestDiffEntries:
    """Tests for diff_entries."""

    def test_empty_store_returns_everything(self):
        entries = [_entry("a"), _entry("b"), _entry("c")]
        assert diff_entries(entries, []) == entries

    def test_known_links_are_excluded(self):
        """Only entries with unseen links remain."""
        entries = [_entry("a"), _entry("b"), _entry("d")]
        result = diff_entries(entries, [_stored("a"), _stored("b")])
        assert result == [_entry("d")]

    def test_known_link_with_changed_title_and_date_is_excluded(self):
        """Link is the only identity; title/date changes do not matter."""
        entries = [_entry("a", title="Renamed", date="other date")]
        assert diff_entries(entries, [_stored("a")]) == []

    def test_order_is_preserved(self):
        entries = [_entry("z"), _entry("a"), _entry("m"), _entry("b")]
        result = diff_entries(entries, [_stored("a")])
        assert [e.link.value for e in result] == [
            "https://example.com/z",
            "https://example.com/m",
            "https://example.com/b",
        ]

    def test_no_partial_matching(self):
        """A link that is a prefix of a stored link is still new."""
        entries = [Entry(title="x", link=Link("https://example.com/a"), publish_date="")]
        stored = [_stored("ab")]
        assert diff_entries(entries, stored) == entries

    def test_accepts_generators(self):
        entries = (e for e in [_entry("a"), _entry("b")])
        assert diff_entries(entries, iter([_stored("a")])) == [_entry("b")]

    def test_title_matching_a_link_string_is_not_a_match(self):
        """A stored title equal to a link string does not count as known."""
        stored = [StoredEntry(
            title="https://example.com/a",
            link=Link("https://example.com/other"),
            publish_date="",
            last_seen="2024-01-01T00:00:00+00:00",
        )]
        assert diff_entries([_entry("a")], stored) == [_entry("a")]

    def test_known_links(self):
        assert known_links([_stored("a"), _stored("b")]) == {
            Link("https://example.com/a"),
            Link("https://example.com/b"),
        }
