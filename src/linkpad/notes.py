"""Note service: saving, loading, and deleting notes with their links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from linkpad.config import Settings
from linkpad.links import Link, LinkSyncError, LinkSynchronizer, SyncReport
from linkpad.runtime import telemetry
from linkpad.session import EditorSession
from linkpad.storage import (
    LinkRepository,
    NoteRepository,
    NoteStorageError,
    create_session_factory,
    init_db,
)


@dataclass(slots=True)
class SaveOutcome:
    """Result of :meth:`NoteService.save`; ``message`` is shown to the user."""

    ok: bool
    message: str
    note_id: Optional[int] = None
    report: Optional[SyncReport] = None


class NoteService:
    """Persists editor sessions.

    The note row and its link legs share one all-or-nothing transaction
    driven by :class:`LinkSynchronizer`, so the stored body never disagrees
    with the stored link geometry.

    Storage failures never escape :meth:`save`; they become a failed
    :class:`SaveOutcome` with the in-memory session left untouched.
    """

    def __init__(self, session_factory, *, max_history: int = 100) -> None:
        self.notes = NoteRepository(session_factory)
        self.links = LinkRepository(session_factory)
        self.synchronizer = LinkSynchronizer(self.links)
        self.max_history = max_history
        self.logger = telemetry.get_logger("linkpad.notes")

    @classmethod
    def from_settings(cls, settings: Settings) -> "NoteService":
        engine = init_db(settings.db_url)
        return cls(create_session_factory(engine), max_history=settings.max_history)

    def save(self, session: EditorSession) -> SaveOutcome:
        title = session.title.strip()
        if not title:
            return SaveOutcome(ok=False, message="Give the note a title before saving")

        has_links = bool(session.links.live())
        previous_id = session.note_id

        def write_note(tx) -> None:
            note_id = self.notes.write(
                tx, session.note_id, title, session.text, has_links=has_links
            )
            if session.note_id is None:
                session.bind_note(note_id)

        with telemetry.span(
            "notes::save",
            logger_name="linkpad.notes",
            component="notes",
            metadata={"note_id": previous_id, "title": title},
        ) as handle:
            try:
                report = self.synchronizer.sync(session.links, note_leg=write_note)
            except LinkSyncError as exc:
                self.logger.warning("note save failed: %s", exc)
                handle.cancel(str(exc))
                if session.note_id != previous_id:
                    session.bind_note(previous_id)
                return SaveOutcome(
                    ok=False, message=self._failure_message(exc), note_id=previous_id
                )
            handle.add_metadata("link_writes", report.writes)

        session.title = title
        session.mark_saved()
        return SaveOutcome(
            ok=True, message=f"Saved '{title}'", note_id=session.note_id, report=report
        )

    @staticmethod
    def _failure_message(exc: LinkSyncError) -> str:
        note_failure = exc.failures.get("note")
        if note_failure is not None:
            return f"Save failed: {note_failure}"
        return f"Save failed, links not saved ({', '.join(exc.legs)} failed)"

    def load(self, note_id: int) -> EditorSession:
        record = self.notes.get(note_id)
        if record is None:
            raise NoteStorageError(f"Note {note_id} not found", note_id=note_id)
        rows = self.links.rows_for(note_id)
        return EditorSession.from_persisted(
            record.id, record.title, record.body, rows, max_history=self.max_history
        )

    def delete(self, note_id: int) -> bool:
        deleted = self.notes.delete(note_id)
        telemetry.record_event(
            "notes.deleted",
            data={"note_id": note_id, "found": deleted},
            logger_name="linkpad.notes",
        )
        return deleted

    def list_notes(self) -> List[Tuple[int, str]]:
        return self.notes.list_titles()

    def create_linked_note(self, session: EditorSession, title: str) -> Optional[Link]:
        """Link the pending anchor to the note titled ``title``, creating it if needed."""

        if session.pending_anchor is None:
            return None
        title = title.strip()
        if not title:
            raise ValueError("Linked note needs a title")
        target_id = self.notes.find_by_title(title)
        if target_id is None:
            target_id = self.notes.create(title, "")
        return session.attach_link(target_id)


__all__ = ["NoteService", "SaveOutcome"]
