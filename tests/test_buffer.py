from __future__ import annotations

import pytest

from linkpad.buffer import (
    Anchor,
    Buffer,
    BufferValidationError,
    CursorMove,
)


def make_buffer(
    *lines: str,
    cursor: tuple[int, int] = (0, 0),
    anchors: dict[int, Anchor] | None = None,
    max_history: int = 100,
) -> Buffer:
    buffer = Buffer.from_lines(lines, anchors=anchors, max_history=max_history)
    buffer.jump(*cursor)
    return buffer


def make_anchor(row: int, start_col: int, end_col: int) -> Anchor:
    return Anchor(row=row, start_col=start_col, end_col=end_col)


def test_insert_before_anchor_shifts_it() -> None:
    buffer = make_buffer("see the docs", anchors={1: make_anchor(0, 8, 12)})

    buffer.insert_text("x")

    anchor = buffer.anchors.get(1)
    assert anchor.geometry == (0, 9, 13)
    assert not anchor.edited
    assert buffer.anchor_text(1) == "docs"


def test_insert_after_anchor_leaves_it() -> None:
    buffer = make_buffer("see the docs!", cursor=(0, 13), anchors={1: make_anchor(0, 8, 12)})

    buffer.insert_text("?")

    assert buffer.anchors.get(1).geometry == (0, 8, 12)


def test_newline_before_anchor_moves_it_down() -> None:
    buffer = make_buffer("see the docs", cursor=(0, 4), anchors={1: make_anchor(0, 8, 12)})

    buffer.insert_newline()

    assert buffer.lines() == ("see ", "the docs")
    assert buffer.anchors.get(1).geometry == (1, 4, 8)


def test_deleting_anchor_line_flags_anchor_deleted() -> None:
    buffer = make_buffer(
        "first", "see the docs", "last", cursor=(1, 0), anchors={1: make_anchor(1, 8, 12)}
    )

    buffer.delete_line()

    assert buffer.anchors.get(1).deleted
    assert 1 in buffer.anchors
    assert buffer.anchors.at((1, 0)) is None


def test_partial_overlap_shrinks_anchor() -> None:
    buffer = make_buffer("see the docs", cursor=(0, 10), anchors={1: make_anchor(0, 8, 12)})

    buffer.delete_next_char()

    anchor = buffer.anchors.get(1)
    assert anchor.geometry == (0, 8, 11)
    assert anchor.edited
    assert buffer.anchor_text(1) == "dos"


def test_undo_never_resurrects_deleted_anchor() -> None:
    buffer = make_buffer("docs", anchors={1: make_anchor(0, 0, 4)})

    buffer.delete_line()
    buffer.undo()

    assert buffer.lines() == ("docs",)
    assert buffer.anchors.get(1).deleted


def test_undo_shifts_anchor_back() -> None:
    buffer = make_buffer("see the docs", anchors={1: make_anchor(0, 8, 12)})

    buffer.insert_text("abc ")
    assert buffer.anchors.get(1).geometry == (0, 12, 16)
    buffer.undo()

    assert buffer.anchors.get(1).geometry == (0, 8, 12)


def test_undo_history_is_capped() -> None:
    buffer = make_buffer("", max_history=2)

    for char in "abc":
        buffer.insert_text(char)

    assert buffer.undo()
    assert buffer.undo()
    assert not buffer.undo()
    assert buffer.lines() == ("a",)


def test_new_edit_discards_redo_tail() -> None:
    buffer = make_buffer("")
    buffer.insert_text("a")
    buffer.undo()

    buffer.insert_text("b")

    assert not buffer.redo()
    assert buffer.text == "b"


def test_version_bumps_only_on_edits() -> None:
    buffer = make_buffer("abc")
    version = buffer.version

    buffer.move_cursor(CursorMove.FORWARD)
    assert buffer.version == version

    buffer.delete_next_char()
    assert buffer.version == version + 1


def test_backspace_joins_lines_at_column_zero() -> None:
    buffer = make_buffer("ab", "cd", cursor=(1, 0))

    assert buffer.delete_char()

    assert buffer.lines() == ("abcd",)
    assert buffer.cursor == (0, 2)


def test_word_motions_cross_lines() -> None:
    buffer = make_buffer("one two", "three")

    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (0, 4)
    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (1, 0)
    buffer.move_cursor(CursorMove.WORD_BACK)
    assert buffer.cursor == (0, 4)


def test_selection_includes_cursor_character() -> None:
    buffer = make_buffer("hello world", cursor=(0, 6))
    buffer.start_selection()
    buffer.jump(0, 10)

    assert buffer.selection_range() == ((0, 6), (0, 11))
    assert buffer.copy()
    assert buffer.registers.get().text == "world"


def test_hop_matches_are_ranked_in_scan_order() -> None:
    buffer = make_buffer("abab", "xab")

    count = buffer.set_hop_pattern("ab")

    assert count == 3
    assert buffer.state.hop_matches == [(0, 0), (0, 2), (1, 1)]
    assert buffer.hop_to_idx(2)
    assert buffer.cursor == (1, 1)
    assert not buffer.hop_to_idx(3)


def test_search_wraps_around() -> None:
    buffer = make_buffer("ab ab", cursor=(0, 3))
    buffer.set_search_pattern("ab")

    assert buffer.search_forward()
    assert buffer.cursor == (0, 0)


def test_search_without_match_keeps_cursor() -> None:
    buffer = make_buffer("abc", cursor=(0, 1))
    buffer.set_search_pattern("zz")

    assert not buffer.search_forward()
    assert not buffer.search_back()
    assert buffer.cursor == (0, 1)


def test_anchor_selection_raises_one_shot_signal() -> None:
    buffer = make_buffer("see the docs", cursor=(0, 8))
    buffer.start_selection()
    buffer.jump(0, 11)

    anchor_id = buffer.anchor_selection()

    assert anchor_id == 1
    assert buffer.take_new_anchor() == 1
    assert buffer.take_new_anchor() is None
    assert buffer.state.selection is None


def test_multi_line_selection_anchors_first_row_only() -> None:
    buffer = make_buffer("alpha", "beta", cursor=(0, 2))
    buffer.start_selection()
    buffer.jump(1, 2)

    anchor_id = buffer.anchor_selection()

    assert buffer.anchors.get(anchor_id).geometry == (0, 2, 5)


def test_replace_range_validates_cursor() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(BufferValidationError):
        buffer.replace_range((0, 0), (3, 0), "", label="bad")


def test_duplicate_anchor_id_rejected() -> None:
    buffer = make_buffer("abc", anchors={1: make_anchor(0, 0, 1)})

    with pytest.raises(ValueError):
        buffer.anchors.add(0, 1, 2, anchor_id=1)
    assert buffer.anchors.next_id() == 2


def test_mirror_reports_live_anchors() -> None:
    buffer = make_buffer(
        "one", "two", anchors={1: make_anchor(0, 0, 3), 2: make_anchor(1, 0, 3)}
    )
    buffer.jump(1, 0)
    buffer.delete_line()

    mirror = buffer.mirror(attributes={"mode": "normal"})

    assert mirror.anchors == ((1, 0, 0, 3),)
    assert mirror.attributes == {"mode": "normal"}
