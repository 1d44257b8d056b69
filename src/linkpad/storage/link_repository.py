"""Repository for link rows; also the backend of the link synchronizer."""

from __future__ import annotations

import logging
from typing import List, Sequence

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from linkpad.links import Link, LinkRow
from linkpad.storage.db_models import DBLink
from linkpad.storage.note_repository import NoteStorageError

logger = logging.getLogger(__name__)


class LinkRepository:
    """Reads link rows and applies the update, insert, and delete legs.

    The legs never commit: they run inside the session handed out by
    :meth:`begin`, and the caller decides whether that session commits.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def begin(self) -> Session:
        return self.session_factory()

    def rows_for(self, parent_note_id: int) -> List[LinkRow]:
        try:
            with self.session_factory() as session:
                db_links = session.scalars(
                    select(DBLink)
                    .where(DBLink.parent_note_id == parent_note_id)
                    .order_by(DBLink.textarea_id)
                ).all()
                return [
                    LinkRow(
                        parent_note_id=db_link.parent_note_id,
                        text_anchor_id=db_link.textarea_id,
                        row=db_link.textarea_row,
                        start_col=db_link.start_col,
                        end_col=db_link.end_col,
                        linked_note_id=db_link.linked_note_id,
                    )
                    for db_link in db_links
                ]
        except SQLAlchemyError as exc:
            raise NoteStorageError(
                f"Could not load links of note {parent_note_id}: {exc}",
                note_id=parent_note_id,
            ) from exc

    def update_links(
        self, tx: Session, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        for link in links:
            tx.execute(
                update(DBLink)
                .where(
                    and_(
                        DBLink.parent_note_id == parent_note_id,
                        DBLink.linked_note_id == link.linked_note_id,
                        DBLink.textarea_id == link.text_anchor_id,
                    )
                )
                .values(
                    textarea_row=link.row,
                    start_col=link.start_col,
                    end_col=link.end_col,
                )
            )
        logger.debug("update leg: %d link(s) of note %s", len(links), parent_note_id)

    def insert_links(
        self, tx: Session, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        tx.execute(
            insert(DBLink),
            [
                {
                    "textarea_id": link.text_anchor_id,
                    "textarea_row": link.row,
                    "start_col": link.start_col,
                    "end_col": link.end_col,
                    "parent_note_id": parent_note_id,
                    "linked_note_id": link.linked_note_id,
                }
                for link in links
            ],
        )
        logger.debug("insert leg: %d link(s) of note %s", len(links), parent_note_id)

    def delete_links(
        self, tx: Session, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        tx.execute(
            delete(DBLink).where(
                and_(
                    DBLink.parent_note_id == parent_note_id,
                    DBLink.textarea_id.in_([link.text_anchor_id for link in links]),
                )
            )
        )
        logger.debug("delete leg: %d link(s) of note %s", len(links), parent_note_id)


__all__ = ["LinkRepository"]
