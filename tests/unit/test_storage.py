"""Unit tests for storage module."""

import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

# Add src to path
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from release_watch.errors import StorageError
from release_watch.ingestion.interfaces import Entry, Link
from release_watch.storage.interfaces import StoredEntry


def _stored(n: int, last_seen: str = "2024-06-05T00:00:00+00:00", title: str = None) -> StoredEntry:
    return StoredEntry(
        title=title or f"Release {n}",
        link=Link(f"https://example.com/notes/{n}"),
        publish_date=f"Mon, 0{n} Jan 2024 00:00:00 GMT",
        last_seen=last_seen,
    )


class TestEntryStore:
    """Tests for EntryStore."""

    def test_insert_and_list_all(self, store, sample_entry):
        """Should insert an entry and read it back."""
        entry_id = store.insert(StoredEntry.from_entry(sample_entry, "2024-06-05T00:00:00+00:00"))
        assert entry_id is not None
        assert entry_id > 0

        stored = store.list_all()
        assert len(stored) == 1
        assert stored[0].id == entry_id
        assert stored[0].title == sample_entry.title
        assert stored[0].link == sample_entry.link
        assert stored[0].publish_date == sample_entry.publish_date
        assert stored[0].last_seen == "2024-06-05T00:00:00+00:00"

    def test_list_all_in_insertion_order(self, store):
        """Full scan should follow insertion order."""
        for n in (3, 1, 2):
            store.insert(_stored(n))

        links = [e.link.value for e in store.list_all()]
        assert links == [
            "https://example.com/notes/3",
            "https://example.com/notes/1",
            "https://example.com/notes/2",
        ]

    def test_list_all_empty(self, store):
        assert store.list_all() == []

    def test_insert_does_not_enforce_uniqueness(self, store):
        """The store appends; dedup is the pipeline's job."""
        store.insert(_stored(1))
        store.insert(_stored(1))
        assert len(store.list_all()) == 2

    def test_get_by_link(self, store):
        store.insert(_stored(1))

        found = store.get_by_link(Link("https://example.com/notes/1"))
        assert found is not None
        assert found.title == "Release 1"
        assert store.get_by_link(Link("https://example.com/missing")) is None

    def test_list_recent(self, store):
        """Should return the newest rows, oldest first."""
        for n in range(1, 6):
            store.insert(_stored(n))

        recent = store.list_recent(limit=2)
        assert [e.title for e in recent] == ["Release 4", "Release 5"]

    def test_search_is_case_insensitive(self, store):
        """Title search should ignore case and order newest first."""
        store.insert(_stored(1, last_seen="2024-06-01T00:00:00+00:00", title="Google Ads API v16"))
        store.insert(_stored(2, last_seen="2024-06-05T00:00:00+00:00", title="google ads api v17"))
        store.insert(_stored(3, last_seen="2024-06-06T00:00:00+00:00", title="Unrelated"))

        results = store.search("ADS API")
        assert [e.title for e in results] == ["google ads api v17", "Google Ads API v16"]
        assert store.search("ads", limit=1)[0].title == "google ads api v17"

    def test_search_treats_wildcards_literally(self, store):
        """%, _ and backslash in the term should only match themselves."""
        store.insert(_stored(1, title="Google Ads API v17"))
        store.insert(_stored(2, title="new_field added"))
        store.insert(_stored(3, title="100% rollout"))
        store.insert(_stored(4, title="path a\\b"))

        assert [e.title for e in store.search("_")] == ["new_field added"]
        assert [e.title for e in store.search("%")] == ["100% rollout"]
        assert [e.title for e in store.search("a\\b")] == ["path a\\b"]
        assert store.search("v1_") == []

    def test_stats(self, store):
        """Should count totals, today and this month."""
        store.insert(_stored(1, last_seen="2024-05-31T23:00:00+00:00"))
        store.insert(_stored(2, last_seen="2024-06-01T09:00:00+00:00"))
        store.insert(_stored(3, last_seen="2024-06-05T00:00:00+00:00"))

        stats = store.get_stats(now=datetime(2024, 6, 5, 12, 0, tzinfo=timezone.utc))

        assert stats["total"] == 3
        assert stats["today"] == 1
        assert stats["this_month"] == 2
        assert stats["last_updated"] == "2024-06-05T00:00:00+00:00"

    def test_stats_empty(self, store):
        stats = store.get_stats()
        assert stats["total"] == 0
        assert stats["last_updated"] is None

    def test_insert_failure_raises_storage_error(self, store):
        """A rejected write should surface as StorageError and roll back."""
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))
        store.Session = MagicMock(return_value=session)

        with pytest.raises(StorageError) as exc_info:
            store.insert(_stored(1))

        assert "https://example.com/notes/1" in str(exc_info.value)
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    @pytest.mark.parametrize("call", [
        lambda s: s.get_by_link(Link("https://example.com/notes/1")),
        lambda s: s.list_recent(),
        lambda s: s.search("ads"),
        lambda s: s.get_stats(),
    ])
    def test_read_failures_raise_storage_error(self, store, call):
        """Every read should surface database errors as StorageError."""
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("no such table"))
        store.Session = MagicMock(return_value=session)

        with pytest.raises(StorageError):
            call(store)

        session.close.assert_called_once()

    def test_stored_entry_from_entry(self):
        entry = Entry(title="T", link=Link("https://x"), publish_date="D")
        stored = StoredEntry.from_entry(entry, "2024-01-01T00:00:00+00:00")
        assert stored.to_dict() == {
            "id": None,
            "title": "T",
            "link": "https://x",
            "publish_date": "D",
            "last_seen": "2024-01-01T00:00:00+00:00",
        }


class TestStorageFactory:
    """Tests for storage factory functions."""

    def test_database_url_prefers_environment(self, monkeypatch):
        from release_watch.storage.factory import get_database_url
        monkeypatch.setenv("DATABASE_URL", "sqlite:////tmp/from-env.db")
        assert get_database_url() == "sqlite:////tmp/from-env.db"

    def test_database_url_falls_back_to_settings(self, monkeypatch):
        from release_watch.config.settings import settings
        from release_watch.storage.factory import get_database_url
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert get_database_url() == settings.database_url

    def test_entry_store_is_cached(self, monkeypatch, temp_db):
        from release_watch.storage.factory import clear_cache, get_entry_store
        monkeypatch.setenv("DATABASE_URL", temp_db)
        clear_cache()
        try:
            assert get_entry_store() is get_entry_store()
        finally:
            clear_cache()
