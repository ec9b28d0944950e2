"""Database operations for release note storage."""

from datetime import datetime, timezone
from typing import Optional, List
from pathlib import Path

from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
import structlog

from .interfaces import StorageInterface, StoredEntry
from .models import ReleaseNoteModel, init_db
from ..config.settings import settings
from ..errors import StorageError
from ..ingestion.interfaces import Link

logger = structlog.get_logger()


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in a search term match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class EntryStore(StorageInterface):
    """SQLite-based storage for observed feed entries."""

    def __init__(self, database_url: str = None):
        if database_url is None:
            database_url = settings.database_url

        # Ensure data directory exists
        if database_url.startswith("sqlite:///"):
            db_path = database_url.replace("sqlite:///", "")
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = init_db(database_url)
        self.Session = sessionmaker(bind=self.engine)

    def list_all(self) -> List[StoredEntry]:
        """Return every stored entry in insertion order."""
        session = self.Session()
        try:
            models = session.query(ReleaseNoteModel)\
                .order_by(ReleaseNoteModel.id)\
                .all()
            return [self._model_to_entry(m) for m in models]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read stored entries: {e}") from e
        finally:
            session.close()

    def insert(self, entry: StoredEntry) -> int:
        """Append one entry, return its id."""
        session = self.Session()
        try:
            model = ReleaseNoteModel(
                title=entry.title,
                link=entry.link.value,
                pub_date=entry.publish_date,
                last_seen=entry.last_seen,
            )
            session.add(model)
            session.commit()
            entry_id = model.id
            logger.debug("entry_saved", id=entry_id, link=entry.link.value[:80])
            return entry_id
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Failed to insert {entry.link.value}: {e}") from e
        finally:
            session.close()

    def get_by_link(self, link: Link) -> Optional[StoredEntry]:
        """Get entry by link."""
        session = self.Session()
        try:
            model = session.query(ReleaseNoteModel)\
                .filter(ReleaseNoteModel.link == link.value)\
                .first()
            return self._model_to_entry(model) if model else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to look up {link.value}: {e}") from e
        finally:
            session.close()

    def list_recent(self, limit: int = 50) -> List[StoredEntry]:
        """Return the most recently stored entries, oldest first."""
        session = self.Session()
        try:
            models = session.query(ReleaseNoteModel)\
                .order_by(ReleaseNoteModel.id.desc())\
                .limit(limit)\
                .all()
            return [self._model_to_entry(m) for m in reversed(models)]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list recent entries: {e}") from e
        finally:
            session.close()

    def search(self, term: str, limit: int = 20) -> List[StoredEntry]:
        """Case-insensitive title search, newest first."""
        session = self.Session()
        try:
            models = session.query(ReleaseNoteModel)\
                .filter(ReleaseNoteModel.title.ilike(f"%{_escape_like(term)}%", escape="\\"))\
                .order_by(ReleaseNoteModel.last_seen.desc(), ReleaseNoteModel.id.desc())\
                .limit(limit)\
                .all()
            return [self._model_to_entry(m) for m in models]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to search entries: {e}") from e
        finally:
            session.close()

    def get_stats(self, now: datetime = None) -> dict:
        """Get basic counts: total, added today, added this month."""
        now = now or datetime.now(timezone.utc)
        today = now.strftime("%Y-%m-%d")
        month = now.strftime("%Y-%m")

        session = self.Session()
        try:
            total = session.query(ReleaseNoteModel).count()
            added_today = session.query(ReleaseNoteModel)\
                .filter(ReleaseNoteModel.last_seen.like(f"{today}%")).count()
            added_this_month = session.query(ReleaseNoteModel)\
                .filter(ReleaseNoteModel.last_seen.like(f"{month}%")).count()
            latest = session.query(ReleaseNoteModel)\
                .order_by(ReleaseNoteModel.id.desc())\
                .first()

            return {
                "total": total,
                "today": added_today,
                "this_month": added_this_month,
                "last_updated": latest.last_seen if latest else None,
            }
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to compute stats: {e}") from e
        finally:
            session.close()

    def _model_to_entry(self, model: ReleaseNoteModel) -> StoredEntry:
        """Convert database model to StoredEntry."""
        return StoredEntry(
            id=model.id,
            title=model.title,
            link=Link(model.link),
            publish_date=model.pub_date,
            last_seen=model.last_seen,
        )
