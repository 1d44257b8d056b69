"""SQLite persistence for notes and links."""

from .db_models import Base, DBLink, DBNote, create_session_factory, init_db
from .link_repository import LinkRepository
from .note_repository import NoteRecord, NoteRepository, NoteStorageError

__all__ = [
    "Base",
    "DBLink",
    "DBNote",
    "LinkRepository",
    "NoteRecord",
    "NoteRepository",
    "NoteStorageError",
    "create_session_factory",
    "init_db",
]
