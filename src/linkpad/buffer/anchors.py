"""Anchor table: integer-keyed spans of text that follow edits."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .document import BufferDocument, Cursor


@dataclass(slots=True)
class Anchor:
    """A single-line span ``[start_col, end_col)`` on ``row``."""

    row: int
    start_col: int
    end_col: int
    edited: bool = False
    deleted: bool = False

    @property
    def geometry(self) -> Tuple[int, int, int]:
        return (self.row, self.start_col, self.end_col)

    def contains(self, cursor: Cursor) -> bool:
        row, col = cursor
        return row == self.row and self.start_col <= col < self.end_col


class AnchorTable:
    """Anchors keyed by caller-assigned (or generated) integer ids.

    Deleted anchors are flagged, never dropped, so observers can notice the
    deletion after the fact.
    """

    def __init__(self, anchors: Optional[Mapping[int, Anchor]] = None) -> None:
        self._anchors: Dict[int, Anchor] = {
            anchor_id: replace(anchor) for anchor_id, anchor in (anchors or {}).items()
        }

    def __contains__(self, anchor_id: object) -> bool:
        return anchor_id in self._anchors

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[int]:
        return iter(self._anchors)

    def items(self) -> Iterator[Tuple[int, Anchor]]:
        yield from self._anchors.items()

    def get(self, anchor_id: int) -> Optional[Anchor]:
        return self._anchors.get(anchor_id)

    def next_id(self) -> int:
        return max(self._anchors, default=0) + 1

    def add(
        self,
        row: int,
        start_col: int,
        end_col: int,
        *,
        anchor_id: Optional[int] = None,
    ) -> int:
        if end_col <= start_col:
            raise ValueError("Anchor must span at least one character")
        new_id = self.next_id() if anchor_id is None else anchor_id
        if new_id in self._anchors:
            raise ValueError(f"Anchor id {new_id} already registered")
        self._anchors[new_id] = Anchor(row=row, start_col=start_col, end_col=end_col)
        return new_id

    def remove(self, anchor_id: int) -> Optional[Anchor]:
        return self._anchors.pop(anchor_id, None)

    def live(self) -> Iterator[Tuple[int, Anchor]]:
        for anchor_id, anchor in self._anchors.items():
            if not anchor.deleted:
                yield anchor_id, anchor

    def at(self, cursor: Cursor) -> Optional[int]:
        for anchor_id, anchor in self.live():
            if anchor.contains(cursor):
                return anchor_id
        return None

    def shift(
        self,
        before: BufferDocument,
        after: BufferDocument,
        start: int,
        end: int,
        inserted: int,
    ) -> None:
        """Carry every live anchor across the replacement of ``[start, end)``.

        Offsets are measured in ``before``; ``inserted`` characters took the
        place of the removed run and positions are re-derived from ``after``.
        """

        delta = inserted - (end - start)
        for anchor in self._anchors.values():
            if anchor.deleted:
                continue
            a = before.offset_for_cursor((anchor.row, anchor.start_col))
            b = before.offset_for_cursor((anchor.row, anchor.end_col))
            if b <= start:
                continue
            if a >= end:
                a, b = a + delta, b + delta
            elif start <= a and b <= end:
                anchor.deleted = True
                continue
            else:
                anchor.edited = True
                new_a = a if a < start else start + inserted
                new_b = b + delta if b > end else start
                a, b = new_a, new_b
                if b <= a:
                    anchor.deleted = True
                    continue
            self._place(anchor, after, a, b)

    @staticmethod
    def _place(anchor: Anchor, document: BufferDocument, a: int, b: int) -> None:
        row, start_col = document.cursor_from_offset(a)
        end_row, end_col = document.cursor_from_offset(b)
        if end_row != row:
            # A newline landed inside the span; keep the head on its line.
            anchor.edited = True
            end_col = document.line_length(row)
        if end_col <= start_col:
            anchor.deleted = True
            return
        anchor.row, anchor.start_col, anchor.end_col = row, start_col, end_col


__all__ = ["Anchor", "AnchorTable"]
