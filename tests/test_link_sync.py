from __future__ import annotations

from typing import List, Sequence, Set

import pytest

from linkpad.links import (
    Link,
    LinkInvariantError,
    LinkRow,
    LinkStore,
    LinkSyncError,
    LinkSynchronizer,
)
from linkpad.session import EditorSession
from linkpad.storage import LinkRepository


class FakeTransaction:
    def __init__(self, fail_commit: bool = False) -> None:
        self.fail_commit = fail_commit
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def commit(self) -> None:
        if self.fail_commit:
            raise RuntimeError("database is locked")
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True

    def close(self) -> None:
        self.closed = True


class FakeBackend:
    def __init__(self, failing: Set[str] = frozenset(), fail_commit: bool = False) -> None:
        self.failing = set(failing)
        self.fail_commit = fail_commit
        self.calls: List[str] = []
        self.transactions: List[FakeTransaction] = []

    def begin(self) -> FakeTransaction:
        tx = FakeTransaction(self.fail_commit)
        self.transactions.append(tx)
        return tx

    def _leg(self, name: str, links: Sequence[Link]) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise RuntimeError(f"{name} exploded")

    def update_links(self, tx, parent_note_id, links) -> None:
        self._leg("update", links)

    def insert_links(self, tx, parent_note_id, links) -> None:
        self._leg("insert", links)

    def delete_links(self, tx, parent_note_id, links) -> None:
        self._leg("delete", links)


def make_dirty_store() -> LinkStore:
    fresh = Link(1, 1, 10, 0, 0, 3)
    moved = Link(1, 2, 11, 1, 2, 5, saved=True, updated=True)
    gone = Link(1, 3, 12, 2, 0, 4, saved=True, deleted=True)
    return LinkStore(1, [fresh, moved, gone])


def draw_link(service, session: EditorSession, row: int, start: int, end: int, title: str):
    session.buffer.jump(row, start)
    session.handle_input("v")
    for _ in range(end - start - 1):
        session.handle_input("l")
    session.handle_input("ctrl+l")
    return service.create_linked_note(session, title)


def type_keys(session: EditorSession, keys: Sequence[str]) -> None:
    for key in keys:
        session.handle_input(key)


def test_failing_legs_are_all_reported_and_rolled_back() -> None:
    backend = FakeBackend(failing={"update", "delete"})
    store = make_dirty_store()

    with pytest.raises(LinkSyncError) as excinfo:
        LinkSynchronizer(backend).sync(store)

    assert excinfo.value.legs == ("update", "delete")
    assert str(excinfo.value.__cause__) == "update exploded"
    assert backend.calls == ["update", "insert", "delete"]
    tx = backend.transactions[0]
    assert tx.rolled_back and tx.closed and not tx.committed
    assert store.classify().counts() == {"update": 1, "insert": 1, "delete": 1}


def test_commit_failure_is_reported_as_its_own_leg() -> None:
    backend = FakeBackend(fail_commit=True)
    store = make_dirty_store()

    with pytest.raises(LinkSyncError) as excinfo:
        LinkSynchronizer(backend).sync(store)

    assert excinfo.value.legs == ("commit",)
    assert backend.transactions[0].rolled_back
    assert len(store) == 3


def test_successful_sync_settles_store() -> None:
    backend = FakeBackend()
    store = make_dirty_store()

    report = LinkSynchronizer(backend).sync(store)

    assert (report.updated, report.inserted, report.deleted) == (1, 1, 1)
    assert backend.transactions[0].committed
    assert sorted(link.text_anchor_id for link in store) == [1, 2]
    assert store.classify().is_empty


def test_empty_diff_skips_the_transaction() -> None:
    backend = FakeBackend()
    never_saved = Link(1, 4, 10, 0, 0, 2, deleted=True)
    store = LinkStore(1, [never_saved])

    report = LinkSynchronizer(backend).sync(store)

    assert report.writes == 0
    assert backend.transactions == []
    assert len(store) == 0


def test_unsaved_parent_cannot_sync() -> None:
    store = LinkStore(None, [Link(None, 1, 10, 0, 0, 3)])

    with pytest.raises(LinkInvariantError):
        LinkSynchronizer(FakeBackend()).sync(store)


def test_failing_note_leg_skips_link_legs() -> None:
    backend = FakeBackend()
    store = make_dirty_store()

    def broken_note(tx) -> None:
        raise RuntimeError("title taken")

    with pytest.raises(LinkSyncError) as excinfo:
        LinkSynchronizer(backend).sync(store, note_leg=broken_note)

    assert excinfo.value.legs == ("note",)
    assert backend.calls == []
    assert backend.transactions[0].rolled_back
    assert not backend.transactions[0].committed


def test_note_leg_binds_parent_before_link_legs() -> None:
    backend = FakeBackend()
    store = LinkStore(None, [Link(None, 1, 10, 0, 0, 3)])

    report = LinkSynchronizer(backend).sync(store, note_leg=lambda tx: store.bind_parent(5))

    assert report.inserted == 1
    assert backend.transactions[0].committed
    assert store.get(1).key == (5, 1)


def test_links_round_trip_through_sqlite(note_service) -> None:
    session = EditorSession.new("Home", "see the docs\nand more")
    link = draw_link(note_service, session, 0, 8, 12, "Docs")

    outcome = note_service.save(session)

    assert outcome.ok
    assert outcome.report.inserted == 1
    loaded = note_service.load(outcome.note_id)
    assert loaded.text == "see the docs\nand more"
    restored = loaded.links.get(link.text_anchor_id)
    assert restored.geometry == (0, 8, 12)
    assert restored.saved and not restored.updated
    assert loaded.buffer.anchor_text(link.text_anchor_id) == "docs"


def test_second_save_without_edits_writes_nothing(note_service, monkeypatch) -> None:
    session = EditorSession.new("Home", "see the docs")
    draw_link(note_service, session, 0, 8, 12, "Docs")
    note_service.save(session)

    def no_link_writes(self, tx, parent_note_id, links):
        raise AssertionError("no link leg should run")

    for leg in ("update_links", "insert_links", "delete_links"):
        monkeypatch.setattr(LinkRepository, leg, no_link_writes)
    outcome = note_service.save(session)

    assert outcome.ok
    assert outcome.report.writes == 0


def test_deleting_linked_text_removes_exactly_that_row(note_service) -> None:
    session = EditorSession.new("Home", "one link\ntwo link")
    first = draw_link(note_service, session, 0, 4, 8, "Alpha")
    draw_link(note_service, session, 1, 4, 8, "Beta")
    note_id = note_service.save(session).note_id

    session.buffer.jump(1, 0)
    type_keys(session, ["d", "d"])
    outcome = note_service.save(session)

    assert outcome.ok
    assert outcome.report.deleted == 1
    rows = note_service.links.rows_for(note_id)
    assert [row.text_anchor_id for row in rows] == [first.text_anchor_id]


def test_failed_leg_leaves_database_and_store_for_retry(note_service, monkeypatch) -> None:
    session = EditorSession.new("Home", "one link\ntwo link\nthree")
    first = draw_link(note_service, session, 0, 4, 8, "Alpha")
    second = draw_link(note_service, session, 1, 4, 8, "Beta")
    note_id = note_service.save(session).note_id
    saved_rows = note_service.links.rows_for(note_id)

    session.buffer.jump(1, 0)
    type_keys(session, ["d", "d"])
    session.buffer.jump(0, 0)
    type_keys(session, ["i", "X", "escape"])
    third = draw_link(note_service, session, 1, 0, 5, "Gamma")

    def broken_delete(self, tx, parent_note_id, links):
        raise RuntimeError("disk full")

    monkeypatch.setattr(LinkRepository, "delete_links", broken_delete)
    outcome = note_service.save(session)

    assert not outcome.ok
    assert outcome.message == "Save failed, links not saved (delete failed)"
    assert note_service.links.rows_for(note_id) == saved_rows
    assert note_service.notes.get(note_id).body == "one link\ntwo link\nthree"
    assert session.links.get(first.text_anchor_id).updated
    assert not session.links.get(third.text_anchor_id).saved
    assert session.links.get(second.text_anchor_id).deleted
    assert session.is_dirty

    monkeypatch.undo()
    retry = note_service.save(session)

    assert retry.ok
    assert (retry.report.updated, retry.report.inserted, retry.report.deleted) == (1, 1, 1)
    assert note_service.links.rows_for(note_id) == [
        LinkRow(note_id, first.text_anchor_id, 0, 5, 9, first.linked_note_id),
        LinkRow(note_id, third.text_anchor_id, 1, 0, 5, third.linked_note_id),
    ]
    assert not session.is_dirty


def test_reload_after_failed_save_matches_stored_body(note_service, monkeypatch) -> None:
    session = EditorSession.new("Home", "one\ntwo\nthree link")
    link = draw_link(note_service, session, 2, 6, 10, "Target")
    note_id = note_service.save(session).note_id

    type_keys(session, ["G", "d", "d", "g", "g", "d", "d"])

    def broken_delete(self, tx, parent_note_id, links):
        raise RuntimeError("disk full")

    monkeypatch.setattr(LinkRepository, "delete_links", broken_delete)
    assert not note_service.save(session).ok

    reloaded = note_service.load(note_id)
    assert reloaded.text == "one\ntwo\nthree link"
    assert reloaded.buffer.anchor_text(link.text_anchor_id) == "link"

    reloaded.handle_input("x")

    assert reloaded.text == "ne\ntwo\nthree link"
    assert reloaded.links.get(link.text_anchor_id).geometry == (2, 6, 10)


def test_failed_first_save_leaves_note_unsaved(note_service, monkeypatch) -> None:
    session = EditorSession.new("Home", "see the docs")
    link = draw_link(note_service, session, 0, 8, 12, "Docs")

    def broken_insert(self, tx, parent_note_id, links):
        raise RuntimeError("disk full")

    monkeypatch.setattr(LinkRepository, "insert_links", broken_insert)
    outcome = note_service.save(session)

    assert not outcome.ok
    assert session.note_id is None
    assert link.parent_note_id is None
    assert note_service.notes.find_by_title("Home") is None

    monkeypatch.undo()
    retry = note_service.save(session)

    assert retry.ok
    assert note_service.links.rows_for(retry.note_id) == [link.to_row()]
