"""Linear undo/redo history of text replacements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .document import Cursor


@dataclass(slots=True)
class UndoEntry:
    """One replacement: ``removed`` at ``offset`` became ``inserted``."""

    label: str
    offset: int
    removed: str
    inserted: str
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Linear undo/redo history capped at ``max_entries``."""

    def __init__(self, max_entries: int = 100) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1
        self.max_entries = max_entries

    def push(self, entry: UndoEntry) -> None:
        if self._index < len(self._entries) - 1:
            self._entries = self._entries[: self._index + 1]
        self._entries.append(entry)
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]
        self._index = len(self._entries) - 1

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self.can_redo():
            return None
        self._index += 1
        return self._entries[self._index]


__all__ = ["UndoEntry", "UndoTimeline"]
