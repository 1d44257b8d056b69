"""Repository for note rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from linkpad.storage.db_models import DBLink, DBNote

logger = logging.getLogger(__name__)


class NoteStorageError(RuntimeError):
    """A note could not be read or written; the transaction was rolled back."""

    def __init__(self, message: str, *, note_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.note_id = note_id


@dataclass(slots=True)
class NoteRecord:
    id: int
    title: str
    body: str
    has_links: bool


class NoteRepository:
    """CRUD over the ``notes`` table.

    Each call runs in its own session and transaction, except :meth:`write`,
    which joins the caller's. SQLAlchemy failures surface as
    :class:`NoteStorageError`.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def create(self, title: str, body: str, *, has_links: bool = False) -> int:
        try:
            with self.session_factory() as session:
                db_note = DBNote(title=title, body=body, has_links=has_links)
                session.add(db_note)
                session.commit()
                logger.debug("created note %s (%r)", db_note.id, title)
                return db_note.id
        except IntegrityError as exc:
            raise NoteStorageError(f"A note titled '{title}' already exists") from exc
        except SQLAlchemyError as exc:
            raise NoteStorageError(f"Could not create note '{title}': {exc}") from exc

    def write(
        self,
        session: Session,
        note_id: Optional[int],
        title: str,
        body: str,
        *,
        has_links: bool,
    ) -> int:
        """Insert or update a note inside ``session`` without committing.

        The row is flushed so a new note has its id, and a duplicate title
        fails here rather than at commit.
        """

        try:
            if note_id is None:
                db_note = DBNote(title=title, body=body, has_links=has_links)
                session.add(db_note)
            else:
                db_note = session.get(DBNote, note_id)
                if db_note is None:
                    raise NoteStorageError(f"Note {note_id} not found", note_id=note_id)
                db_note.title = title
                db_note.body = body
                db_note.has_links = has_links
            session.flush()
        except IntegrityError as exc:
            raise NoteStorageError(
                f"A note titled '{title}' already exists", note_id=note_id
            ) from exc
        except SQLAlchemyError as exc:
            raise NoteStorageError(
                f"Could not save note '{title}': {exc}", note_id=note_id
            ) from exc
        logger.debug("wrote note %s (%r)", db_note.id, title)
        return db_note.id

    def get(self, note_id: int) -> Optional[NoteRecord]:
        try:
            with self.session_factory() as session:
                db_note = session.get(DBNote, note_id)
                if db_note is None:
                    return None
                return NoteRecord(
                    id=db_note.id,
                    title=db_note.title,
                    body=db_note.body,
                    has_links=db_note.has_links,
                )
        except SQLAlchemyError as exc:
            raise NoteStorageError(
                f"Could not load note {note_id}: {exc}", note_id=note_id
            ) from exc

    def find_by_title(self, title: str) -> Optional[int]:
        try:
            with self.session_factory() as session:
                return session.scalar(select(DBNote.id).where(DBNote.title == title))
        except SQLAlchemyError as exc:
            raise NoteStorageError(f"Could not look up '{title}': {exc}") from exc

    def list_titles(self) -> List[Tuple[int, str]]:
        try:
            with self.session_factory() as session:
                rows = session.execute(
                    select(DBNote.id, DBNote.title).order_by(DBNote.id)
                ).all()
                return [(row.id, row.title) for row in rows]
        except SQLAlchemyError as exc:
            raise NoteStorageError(f"Could not list notes: {exc}") from exc

    def delete(self, note_id: int) -> bool:
        """Delete a note and every link that points from or to it."""

        try:
            with self.session_factory() as session:
                with session.begin():
                    session.execute(
                        delete(DBLink).where(
                            or_(
                                DBLink.parent_note_id == note_id,
                                DBLink.linked_note_id == note_id,
                            )
                        )
                    )
                    result = session.execute(delete(DBNote).where(DBNote.id == note_id))
                return bool(result.rowcount)
        except SQLAlchemyError as exc:
            raise NoteStorageError(
                f"Could not delete note {note_id}: {exc}", note_id=note_id
            ) from exc


__all__ = ["NoteRepository", "NoteRecord", "NoteStorageError"]
