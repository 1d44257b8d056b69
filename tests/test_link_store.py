from __future__ import annotations

import pytest

from linkpad.buffer import Anchor, AnchorTable
from linkpad.links import Link, LinkInvariantError, LinkRow, LinkStore


def make_link(
    anchor_id: int,
    *,
    row: int = 0,
    start_col: int = 0,
    end_col: int = 4,
    linked_note_id: int = 99,
    saved: bool = False,
) -> Link:
    return Link(
        parent_note_id=1,
        text_anchor_id=anchor_id,
        linked_note_id=linked_note_id,
        row=row,
        start_col=start_col,
        end_col=end_col,
        saved=saved,
    )


def make_table(**anchors: Anchor) -> AnchorTable:
    return AnchorTable({int(key.lstrip("a")): anchor for key, anchor in anchors.items()})


def test_new_link_starts_with_flags_cleared() -> None:
    store = LinkStore(1)

    link = store.insert(make_link(1))

    assert (link.saved, link.updated, link.deleted) == (False, False, False)
    assert 1 in store


def test_duplicate_anchor_is_an_invariant_violation() -> None:
    store = LinkStore(1, [make_link(1)])

    with pytest.raises(LinkInvariantError):
        store.insert(make_link(1))


def test_reconcile_marks_deleted_idempotently() -> None:
    store = LinkStore(1, [make_link(1, saved=True)])
    table = make_table(a1=Anchor(0, 0, 4, deleted=True))

    assert store.reconcile(table) == 1
    assert store.reconcile(table) == 0
    assert store.get(1).deleted


def test_reconcile_copies_moved_geometry() -> None:
    store = LinkStore(1, [make_link(1, saved=True)])
    table = make_table(a1=Anchor(2, 3, 6, edited=True))

    store.reconcile(table)

    link = store.get(1)
    assert link.geometry == (2, 3, 6)
    assert link.updated
    assert not link.deleted


def test_reconcile_ignores_unchanged_anchor() -> None:
    store = LinkStore(1, [make_link(1, saved=True)])

    assert store.reconcile(make_table(a1=Anchor(0, 0, 4))) == 0
    assert not store.get(1).updated


def test_reconcile_with_missing_anchor_fails_loudly() -> None:
    store = LinkStore(1, [make_link(7)])

    with pytest.raises(AssertionError):
        store.reconcile(AnchorTable())


def test_classify_partitions_records() -> None:
    fresh = make_link(1)
    moved = make_link(2, saved=True)
    moved.updated = True
    gone = make_link(3, saved=True)
    gone.deleted = True
    never_saved = make_link(4)
    never_saved.deleted = True
    clean = make_link(5, saved=True)
    store = LinkStore(1, [fresh, moved, gone, never_saved, clean])

    diff = store.classify()

    assert diff.to_insert == (fresh,)
    assert diff.to_update == (moved,)
    assert diff.to_delete == (gone,)
    assert diff.counts() == {"update": 1, "insert": 1, "delete": 1}


def test_apply_commit_settles_flags_and_drops_deleted() -> None:
    fresh = make_link(1)
    moved = make_link(2, saved=True)
    moved.updated = True
    gone = make_link(3, saved=True)
    gone.deleted = True
    never_saved = make_link(4)
    never_saved.deleted = True
    store = LinkStore(1, [fresh, moved, gone, never_saved])

    store.apply_commit(store.classify())

    assert sorted(link.text_anchor_id for link in store) == [1, 2]
    assert all(link.saved and not link.updated for link in store)
    assert store.classify().is_empty


def test_from_rows_rehydrates_clean_saved_links() -> None:
    rows = [LinkRow(5, 1, 0, 2, 6, 8), LinkRow(5, 2, 3, 0, 1, 9)]

    store = LinkStore.from_rows(5, rows)

    assert len(store) == 2
    for link in store:
        assert (link.saved, link.updated, link.deleted) == (True, False, False)
    assert store.get(1).geometry == (0, 2, 6)
    assert store.rows() == rows


def test_from_rows_rejects_foreign_parent() -> None:
    with pytest.raises(LinkInvariantError):
        LinkStore.from_rows(5, [LinkRow(6, 1, 0, 0, 1, 8)])


def test_bind_parent_updates_every_record() -> None:
    store = LinkStore()
    store.insert(Link(None, 1, 42, 0, 0, 3))

    store.bind_parent(11)

    assert store.parent_note_id == 11
    assert store.get(1).key == (11, 1)
    assert store.rows() == [LinkRow(11, 1, 0, 0, 3, 42)]


def test_link_at_skips_deleted_links() -> None:
    live = make_link(1, row=0, start_col=2, end_col=5)
    gone = make_link(2, row=1, start_col=0, end_col=3)
    gone.deleted = True
    store = LinkStore(1, [live, gone])

    assert store.link_at((0, 4)) is live
    assert store.link_at((0, 5)) is None
    assert store.link_at((1, 1)) is None
    assert store.rows() == [live.to_row()]
