"""Core document data structures for linkpad buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

Cursor = Tuple[int, int]  # (row, column)


@dataclass(slots=True)
class BufferDocument:
    """Text storage built on a simple list-of-lines model.

    Documents are replaced rather than mutated; every replacement bumps
    ``version`` so observers can cheaply tell whether an edit happened.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.split("\n"), version=0)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        collected = list(lines)
        return cls(_lines=collected or [""], version=0)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def replace_text(self, text: str) -> "BufferDocument":
        """Return a new document holding ``text`` with a bumped version."""

        return BufferDocument(_lines=text.split("\n"), version=self.version + 1)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def last_row(self) -> int:
        return len(self._lines) - 1

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def line_length(self, index: int) -> int:
        return len(self._lines[index])

    def offset_for_cursor(self, cursor: Cursor) -> int:
        row, col = cursor
        offset = 0
        for i in range(row):
            offset += len(self._lines[i]) + 1  # newline
        return offset + col

    def cursor_from_offset(self, offset: int) -> Cursor:
        running = 0
        for row, line in enumerate(self._lines):
            line_len = len(line)
            if offset <= running + line_len:
                return (row, max(0, offset - running))
            running += line_len + 1
        return (self.last_row, len(self._lines[-1]))


__all__ = ["BufferDocument", "Cursor"]
