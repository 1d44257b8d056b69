"""High-level buffer façade combining document, state, registers, undo, and anchors."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, Mapping, Optional, Sequence, Tuple

from linkpad.runtime import telemetry

from .anchors import Anchor, AnchorTable
from .document import BufferDocument, Cursor
from .motions import (
    CursorMove,
    next_word_end,
    next_word_start,
    prev_word_begin,
    prev_word_start,
)
from .registers import RegisterBank
from .state import Alignment, BufferState
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline
from .validation import clamp_cursor, ensure_cursor

TAB_TEXT = "    "


class Buffer:
    """Mutable multi-line text with cursor motions, edits, and an anchor table.

    The buffer knows nothing about notes or links: anchors are plain integer
    keyed spans that shift with the text. Every edit funnels through
    ``_replace`` so anchors, undo history, and the document version stay in
    step.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        registers: Optional[RegisterBank] = None,
        undo: Optional[UndoTimeline] = None,
        anchors: Optional[AnchorTable] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.registers = registers or RegisterBank()
        self.undo_timeline = undo or UndoTimeline()
        self.anchors = anchors or AnchorTable()
        self._new_anchor: Optional[int] = None
        self._last_removed = ""
        self.logger = telemetry.get_logger("linkpad.buffer")

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        anchors: Optional[Mapping[int, Anchor]] = None,
        max_history: int = 100,
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_text(text),
            undo=UndoTimeline(max_entries=max_history),
            anchors=AnchorTable(anchors),
        )

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        *,
        name: str = "default",
        anchors: Optional[Mapping[int, Anchor]] = None,
        max_history: int = 100,
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_lines(lines),
            undo=UndoTimeline(max_entries=max_history),
            anchors=AnchorTable(anchors),
        )

    # -- queries ---------------------------------------------------------

    @property
    def version(self) -> int:
        return self.document.version

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def text(self) -> str:
        return self.document.text

    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    def line(self, row: int) -> str:
        return self.document.get_line(row)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        anchors = tuple(
            (anchor_id, *anchor.geometry) for anchor_id, anchor in self.anchors.live()
        )
        return BufferMirror(
            text=self.document.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            alignment=self.state.alignment,
            search_pattern=self.state.search_pattern,
            anchors=anchors,
            hop_matches=tuple(self.state.hop_matches),
            attributes=dict(attributes or {}),
        )

    # -- motions ---------------------------------------------------------

    def jump(self, row: int, col: int) -> None:
        self.state.set_cursor(*clamp_cursor(self.document, row, col))

    def move_cursor(self, move: CursorMove) -> bool:
        """Move the cursor; returns ``False`` when already at the edge."""

        before = self.state.cursor
        row, col = before
        lines = self.document.snapshot()
        if move is CursorMove.FORWARD:
            target = (row, min(col + 1, len(lines[row])))
        elif move is CursorMove.BACK:
            target = (row, max(col - 1, 0))
        elif move is CursorMove.UP:
            target = clamp_cursor(self.document, row - 1, col)
        elif move is CursorMove.DOWN:
            target = clamp_cursor(self.document, row + 1, col)
        elif move is CursorMove.WORD_FORWARD:
            target = next_word_start(lines, before)
        elif move is CursorMove.WORD_BACK:
            target = prev_word_start(lines, before)
        elif move is CursorMove.HEAD:
            target = (row, 0)
        elif move is CursorMove.END:
            target = (row, len(lines[row]))
        elif move is CursorMove.TOP:
            target = clamp_cursor(self.document, 0, col)
        elif move is CursorMove.BOTTOM:
            target = clamp_cursor(self.document, self.document.last_row, col)
        else:  # pragma: no cover - exhaustive over CursorMove
            raise ValueError(f"Unknown cursor move {move!r}")
        self.state.set_cursor(*target)
        return target != before

    # -- edits -----------------------------------------------------------

    def replace_range(
        self, start: Cursor, end: Cursor, text: str, *, label: str
    ) -> str:
        start = ensure_cursor(self.document, start)
        end = ensure_cursor(self.document, end)
        if start > end:
            start, end = end, start
        return self._replace(
            self.document.offset_for_cursor(start),
            self.document.offset_for_cursor(end),
            text,
            label=label,
        )

    def insert_text(self, text: str) -> None:
        offset = self.document.offset_for_cursor(self.state.cursor)
        self._replace(offset, offset, text, label="insert_text")

    def insert_newline(self) -> None:
        self.insert_text("\n")

    def insert_tab(self) -> None:
        self.insert_text(TAB_TEXT)

    def delete_char(self) -> bool:
        """Delete the character before the cursor, joining lines at column 0."""

        offset = self.document.offset_for_cursor(self.state.cursor)
        if offset == 0:
            return False
        self._replace(offset - 1, offset, "", label="delete_char", kill=True)
        return True

    def delete_next_char(self) -> bool:
        offset = self.document.offset_for_cursor(self.state.cursor)
        if offset >= len(self.document.text):
            return False
        self._replace(
            offset,
            offset + 1,
            "",
            label="delete_next_char",
            cursor_after=self.state.cursor,
            kill=True,
        )
        return True

    def delete_line_by_end(self) -> bool:
        row, col = self.state.cursor
        line_len = self.document.line_length(row)
        if col >= line_len:
            return False
        self.replace_range((row, col), (row, line_len), "", label="delete_line_by_end")
        self.registers.yank_to('"', self._last_removed)
        return True

    def delete_line(self, *, move_up: bool = False) -> bool:
        """Delete the cursor line; with ``move_up`` the cursor climbs one row."""

        row, _ = self.state.cursor
        document = self.document
        line = document.get_line(row)
        if document.line_count == 1:
            if not line:
                return False
            self._replace(0, len(line), "", label="delete_line", cursor_after=(0, 0))
        elif row < document.last_row:
            start = document.offset_for_cursor((row, 0))
            end = document.offset_for_cursor((row + 1, 0))
            self._replace(start, end, "", label="delete_line", cursor_after=(row, 0))
        else:
            start = document.offset_for_cursor((row - 1, document.line_length(row - 1)))
            end = document.offset_for_cursor((row, len(line)))
            self._replace(
                start, end, "", label="delete_line", cursor_after=(row - 1, 0)
            )
        self.registers.yank_to('"', line, register_type="line")
        if move_up and self.state.cursor[0] == row and row > 0:
            self.state.set_cursor(row - 1, 0)
        return True

    def delete_next_word(self) -> bool:
        row, col = self.state.cursor
        line = self.document.get_line(row)
        if col >= len(line):
            return self.delete_next_char()
        end = next_word_end(line, col)
        if end == col:
            return False
        self.replace_range((row, col), (row, end), "", label="delete_next_word")
        self.state.set_cursor(row, col)
        self.registers.yank_to('"', self._last_removed)
        return True

    def delete_word(self) -> bool:
        row, col = self.state.cursor
        if col == 0:
            return self.delete_char()
        line = self.document.get_line(row)
        start = prev_word_begin(line, min(col, len(line)))
        self.replace_range((row, start), (row, col), "", label="delete_word")
        self.registers.yank_to('"', self._last_removed)
        return True

    def open_line_below(self) -> None:
        row, _ = self.state.cursor
        self.state.set_cursor(row, self.document.line_length(row))
        self.insert_newline()

    def open_line_above(self) -> None:
        row, _ = self.state.cursor
        offset = self.document.offset_for_cursor((row, 0))
        self._replace(offset, offset, "\n", label="open_line_above", cursor_after=(row, 0))

    def paste(self) -> bool:
        value = self.registers.get('"')
        if not value.text:
            return False
        row, _ = self.state.cursor
        if value.type == "line":
            offset = self.document.offset_for_cursor(
                (row, self.document.line_length(row))
            )
            self._replace(
                offset, offset, "\n" + value.text, label="paste", cursor_after=(row + 1, 0)
            )
        else:
            self.insert_text(value.text)
        return True

    def undo(self) -> bool:
        entry = self.undo_timeline.undo()
        if entry is None:
            return False
        self._replace(
            entry.offset,
            entry.offset + len(entry.inserted),
            entry.removed,
            label=f"undo::{entry.label}",
            cursor_after=entry.cursor_before,
            record=False,
        )
        return True

    def redo(self) -> bool:
        entry = self.undo_timeline.redo()
        if entry is None:
            return False
        self._replace(
            entry.offset,
            entry.offset + len(entry.removed),
            entry.inserted,
            label=f"redo::{entry.label}",
            cursor_after=entry.cursor_after,
            record=False,
        )
        return True

    # -- selection -------------------------------------------------------

    def start_selection(self) -> None:
        self.state.start_selection()

    def cancel_selection(self) -> None:
        self.state.clear_selection()

    def selection_range(self) -> Optional[Tuple[Cursor, Cursor]]:
        """Selection as a half-open range; the character under the cursor is included."""

        selection = self.state.selection
        if selection is None:
            return None
        start, (end_row, end_col) = selection
        end = (end_row, min(end_col + 1, self.document.line_length(end_row)))
        return (start, end)

    def copy(self) -> bool:
        selected = self.selection_range()
        if selected is None:
            return False
        start, end = selected
        document = self.document
        text = document.text[
            document.offset_for_cursor(start) : document.offset_for_cursor(end)
        ]
        self.registers.yank_to('"', text)
        self.cancel_selection()
        return True

    def cut(self) -> bool:
        selected = self.selection_range()
        if selected is None:
            return False
        start, end = selected
        self.cancel_selection()
        if start == end:
            return False
        self.replace_range(start, end, "", label="cut")
        self.registers.yank_to('"', self._last_removed)
        return True

    # -- search / alignment ------------------------------------------------

    def set_search_pattern(self, pattern: Optional[str]) -> None:
        self.state.search_pattern = pattern or None

    def clear_search(self) -> None:
        self.state.clear_search()

    def search_forward(self) -> bool:
        pattern = self.state.search_pattern
        if not pattern:
            return False
        text = self.document.text
        offset = self.document.offset_for_cursor(self.state.cursor)
        found = text.find(pattern, offset + 1)
        if found == -1:
            found = text.find(pattern)
        if found == -1:
            return False
        self.state.set_cursor(*self.document.cursor_from_offset(found))
        return True

    def search_back(self) -> bool:
        pattern = self.state.search_pattern
        if not pattern:
            return False
        text = self.document.text
        offset = self.document.offset_for_cursor(self.state.cursor)
        found = text.rfind(pattern, 0, offset - 1 + len(pattern)) if offset else -1
        if found == -1:
            found = text.rfind(pattern)
        if found == -1:
            return False
        self.state.set_cursor(*self.document.cursor_from_offset(found))
        return True

    def set_alignment(self, alignment: Alignment) -> None:
        self.state.alignment = alignment

    # -- hop ---------------------------------------------------------------

    def set_hop_pattern(self, key: str) -> int:
        """Rank every occurrence of ``key`` in scan order; returns the match count."""

        matches = []
        for row, line in enumerate(self.document.snapshot()):
            col = line.find(key)
            while col != -1:
                matches.append((row, col))
                col = line.find(key, col + 1)
        self.state.hop_key = key
        self.state.hop_matches = matches
        telemetry.record_event(
            "buffer.hop", level="debug", data={"key": key, "matches": len(matches)}
        )
        return len(matches)

    def hop_to_idx(self, index: int) -> bool:
        matches = self.state.hop_matches
        if not 0 <= index < len(matches):
            return False
        self.state.set_cursor(*matches[index])
        return True

    def clear_hop(self) -> None:
        self.state.clear_hop()

    # -- anchors -----------------------------------------------------------

    def anchor_selection(self) -> Optional[int]:
        """Anchor the selected run (first row only) and raise the new-anchor signal."""

        selected = self.selection_range()
        self.cancel_selection()
        if selected is None:
            return None
        (row, start_col), (end_row, end_col) = selected
        if end_row != row:
            end_col = self.document.line_length(row)
        if end_col <= start_col:
            return None
        anchor_id = self.anchors.add(row, start_col, end_col)
        self._new_anchor = anchor_id
        telemetry.record_event(
            "buffer.anchor",
            data={"anchor_id": anchor_id, "row": row, "cols": (start_col, end_col)},
        )
        return anchor_id

    def take_new_anchor(self) -> Optional[int]:
        """Return (once) the id of an anchor drawn since the last call."""

        anchor_id, self._new_anchor = self._new_anchor, None
        return anchor_id

    def anchor_text(self, anchor_id: int) -> str:
        anchor = self.anchors.get(anchor_id)
        if anchor is None or anchor.deleted:
            return ""
        return self.document.get_line(anchor.row)[anchor.start_col : anchor.end_col]

    # -- internals -----------------------------------------------------------

    def _replace(
        self,
        start: int,
        end: int,
        text: str,
        *,
        label: str,
        cursor_after: Optional[Cursor] = None,
        record: bool = True,
        kill: bool = False,
    ) -> str:
        with Transaction(self, label) as tx:
            before = self.document
            old_text = before.text
            removed = old_text[start:end]
            cursor_before = self.state.cursor
            after = before.replace_text(old_text[:start] + text + old_text[end:])
            self.document = after
            self.anchors.shift(before, after, start, end, len(text))
            if cursor_after is None:
                cursor_after = after.cursor_from_offset(start + len(text))
            self.state.set_cursor(*clamp_cursor(after, *cursor_after))
            self._last_removed = removed
            if record:
                tx.commit(
                    UndoEntry(
                        label=label,
                        offset=start,
                        removed=removed,
                        inserted=text,
                        cursor_before=cursor_before,
                        cursor_after=self.state.cursor,
                    )
                )
        if kill and removed:
            self.registers.yank_to('"', removed)
        return removed


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            logger_name="linkpad.buffer",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, entry: UndoEntry) -> None:
        self.buffer.undo_timeline.push(entry)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "Transaction"]
