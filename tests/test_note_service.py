from __future__ import annotations

import pytest

from linkpad.config import Settings
from linkpad.notes import NoteService
from linkpad.session import EditorSession
from linkpad.storage import NoteStorageError


def make_session(title: str = "Home", text: str = "see the docs") -> EditorSession:
    return EditorSession.new(title, text)


def start_link(session: EditorSession, row: int, start: int, end: int) -> None:
    session.buffer.jump(row, start)
    session.handle_input("v")
    for _ in range(end - start - 1):
        session.handle_input("l")
    session.handle_input("ctrl+l")


def test_save_requires_a_title(note_service) -> None:
    outcome = note_service.save(make_session(title="   "))

    assert not outcome.ok
    assert outcome.note_id is None
    assert note_service.list_notes() == []


def test_save_creates_then_updates_note(note_service) -> None:
    session = make_session()

    first = note_service.save(session)
    session.buffer.jump(0, 0)
    session.handle_input("x")
    second = note_service.save(session)

    assert first.ok and second.ok
    assert first.message == "Saved 'Home'"
    assert first.note_id == second.note_id == session.note_id
    assert note_service.list_notes() == [(session.note_id, "Home")]
    assert note_service.notes.get(session.note_id).body == "ee the docs"
    assert not session.is_dirty


def test_duplicate_title_fails_without_losing_buffer(note_service) -> None:
    note_service.save(make_session())
    other = make_session(text="other text")

    outcome = note_service.save(other)

    assert not outcome.ok
    assert "already exists" in outcome.message
    assert other.note_id is None
    assert other.text == "other text"


def test_load_missing_note_raises(note_service) -> None:
    with pytest.raises(NoteStorageError) as excinfo:
        note_service.load(404)

    assert excinfo.value.note_id == 404


def test_create_linked_note_creates_target_once(note_service) -> None:
    session = make_session(text="see the docs and the docs")
    start_link(session, 0, 8, 12)
    first = note_service.create_linked_note(session, " Docs ")
    start_link(session, 0, 21, 25)
    second = note_service.create_linked_note(session, "Docs")

    assert first.linked_note_id == second.linked_note_id
    assert note_service.notes.find_by_title("Docs") == first.linked_note_id
    assert session.pending_anchor is None
    assert len(session.links) == 2
    assert note_service.save(session).ok
    assert [row.start_col for row in session.persistable_links()] == [8, 21]


def test_create_linked_note_without_pending_anchor_is_noop(note_service) -> None:
    session = make_session()

    assert note_service.create_linked_note(session, "Docs") is None
    assert note_service.list_notes() == []


def test_create_linked_note_rejects_blank_title(note_service) -> None:
    session = make_session()
    start_link(session, 0, 8, 12)

    with pytest.raises(ValueError):
        note_service.create_linked_note(session, "  ")
    assert session.pending_anchor is not None


def test_cancelled_link_releases_anchor(note_service) -> None:
    session = make_session()
    start_link(session, 0, 8, 12)
    anchor_id = session.pending_anchor

    session.cancel_link()

    assert session.pending_anchor is None
    assert anchor_id not in session.buffer.anchors
    assert not session.links.has_records


def test_delete_removes_links_in_both_directions(note_service) -> None:
    home = make_session()
    start_link(home, 0, 8, 12)
    link = note_service.create_linked_note(home, "Docs")
    home_id = note_service.save(home).note_id
    docs = note_service.load(link.linked_note_id)
    docs.buffer.jump(0, 0)
    docs.handle_input("i")
    for char in "back":
        docs.handle_input(char)
    docs.handle_input("escape")
    start_link(docs, 0, 0, 4)
    note_service.create_linked_note(docs, "Home")
    assert note_service.save(docs).ok

    assert note_service.delete(home_id)

    assert note_service.list_notes() == [(link.linked_note_id, "Docs")]
    assert note_service.links.rows_for(home_id) == []
    assert note_service.links.rows_for(link.linked_note_id) == []
    assert not note_service.delete(home_id)


def test_from_settings_builds_database(temp_db_dir) -> None:
    settings = Settings(db_path=temp_db_dir / "notes.db")

    service = NoteService.from_settings(settings)

    assert service.list_notes() == []
    assert (temp_db_dir / "notes.db").exists()
