"""SQLAlchemy models for the release notes database."""

from sqlalchemy import create_engine, Column, Integer, String, Text, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReleaseNoteModel(Base):
    """Database model for observed release notes."""
    __tablename__ = "release_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(Text, nullable=False, default="")
    # Not unique at the schema level: the pipeline only inserts links it has
    # just checked against list_all().
    link = Column(String(2048), nullable=False, default="")
    pub_date = Column(String(255), nullable=False, default="")

    # ISO-8601 UTC string of the run that first saw the entry
    last_seen = Column(String(64), nullable=False)

    __table_args__ = (
        Index('idx_release_notes_link', 'link'),
        Index('idx_release_notes_last_seen', 'last_seen'),
    )


def init_db(database_url: str):
    """Initialize database and create all tables."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return engine
