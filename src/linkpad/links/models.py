"""Link records mirroring buffer anchors, plus their persisted row form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from linkpad.buffer import Anchor


class LinkRow(NamedTuple):
    """One persisted ``links`` row, independent of any ORM."""

    parent_note_id: int
    text_anchor_id: int
    row: int
    start_col: int
    end_col: int
    linked_note_id: int


@dataclass(slots=True)
class Link:
    """A hyperlink from a text run in the parent note to ``linked_note_id``.

    ``saved`` means a persisted row exists, ``updated`` that the geometry
    drifted since it was written, and ``deleted`` that the anchored text is
    gone and the row must be removed on the next save.
    """

    parent_note_id: Optional[int]
    text_anchor_id: int
    linked_note_id: int
    row: int
    start_col: int
    end_col: int
    saved: bool = False
    updated: bool = False
    deleted: bool = False

    @property
    def key(self) -> Tuple[Optional[int], int]:
        return (self.parent_note_id, self.text_anchor_id)

    @property
    def geometry(self) -> Tuple[int, int, int]:
        return (self.row, self.start_col, self.end_col)

    def moved(self, anchor: Anchor) -> bool:
        return self.geometry != anchor.geometry

    def follow(self, anchor: Anchor) -> None:
        self.row, self.start_col, self.end_col = anchor.geometry
        self.updated = True

    def to_anchor(self) -> Anchor:
        return Anchor(row=self.row, start_col=self.start_col, end_col=self.end_col)

    def to_row(self) -> LinkRow:
        if self.parent_note_id is None:
            raise ValueError("Link has no parent note yet")
        return LinkRow(
            parent_note_id=self.parent_note_id,
            text_anchor_id=self.text_anchor_id,
            row=self.row,
            start_col=self.start_col,
            end_col=self.end_col,
            linked_note_id=self.linked_note_id,
        )

    @classmethod
    def from_row(cls, row: LinkRow) -> "Link":
        return cls(
            parent_note_id=row.parent_note_id,
            text_anchor_id=row.text_anchor_id,
            linked_note_id=row.linked_note_id,
            row=row.row,
            start_col=row.start_col,
            end_col=row.end_col,
            saved=True,
        )


__all__ = ["Link", "LinkRow"]
