"""SQLAlchemy models for the notes and links tables."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class DBNote(Base):
    """A note: unique title, body text, and whether it carries links."""

    __tablename__ = "notes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, unique=True, nullable=False)
    body = Column(Text, nullable=False, default="")
    has_links = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}')>"


class DBLink(Base):
    """A link from a text anchor in ``parent_note_id`` to ``linked_note_id``."""

    __tablename__ = "links"
    id = Column(Integer, primary_key=True, autoincrement=True)
    textarea_id = Column(Integer, nullable=False)
    textarea_row = Column(Integer, nullable=False)
    start_col = Column(Integer, nullable=False)
    end_col = Column(Integer, nullable=False)
    parent_note_id = Column(Integer, ForeignKey("notes.id"), nullable=False, index=True)
    linked_note_id = Column(Integer, ForeignKey("notes.id"), nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<Link(id={self.id}, parent={self.parent_note_id}, "
            f"anchor={self.textarea_id}, target={self.linked_note_id})>"
        )


def init_db(db_url: str) -> Engine:
    """Create the engine and tables; SQLite foreign keys are enforced per connection."""

    engine = create_engine(db_url)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


__all__ = ["Base", "DBNote", "DBLink", "init_db", "create_session_factory"]
