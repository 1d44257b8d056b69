"""Cursor, selection, search, and hop state for buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .document import Cursor

Selection = Tuple[Cursor, Cursor]


class Alignment(str, Enum):
    """Horizontal alignment the host applies when rendering the buffer."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + selection info tied to a BufferDocument version."""

    cursor: Cursor = (0, 0)
    selection_start: Optional[Cursor] = None
    search_pattern: Optional[str] = None
    alignment: Alignment = Alignment.LEFT
    hop_key: Optional[str] = None
    hop_matches: List[Cursor] = field(default_factory=list)

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    @property
    def selection(self) -> Optional[Selection]:
        """Selection as ``(start, end)`` in document order, cursor included."""

        if self.selection_start is None:
            return None
        start, end = sorted((self.selection_start, self.cursor))
        return (start, end)

    def start_selection(self) -> None:
        self.selection_start = self.cursor

    def clear_selection(self) -> None:
        self.selection_start = None

    def clear_search(self) -> None:
        self.search_pattern = None

    def clear_hop(self) -> None:
        self.hop_key = None
        self.hop_matches = []


__all__ = ["Alignment", "BufferState", "Selection"]
