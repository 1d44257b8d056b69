"""Cursor motion vocabulary and word-boundary helpers."""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .document import Cursor


class CursorMove(str, Enum):
    FORWARD = "forward"
    BACK = "back"
    UP = "up"
    DOWN = "down"
    WORD_FORWARD = "word_forward"
    WORD_BACK = "word_back"
    HEAD = "head"
    END = "end"
    TOP = "top"
    BOTTOM = "bottom"


def char_class(ch: str) -> int:
    """0 for whitespace, 1 for word characters, 2 for punctuation."""

    if ch.isspace():
        return 0
    if ch.isalnum() or ch == "_":
        return 1
    return 2


def _skip_blank(line: str, col: int) -> int:
    while col < len(line) and line[col].isspace():
        col += 1
    return col


def next_word_start(lines: Sequence[str], cursor: Cursor) -> Cursor:
    row, col = cursor
    line = lines[row]
    if col < len(line):
        cls = char_class(line[col])
        if cls:
            while col < len(line) and char_class(line[col]) == cls:
                col += 1
        col = _skip_blank(line, col)
        if col < len(line):
            return (row, col)
    if row + 1 < len(lines):
        return (row + 1, _skip_blank(lines[row + 1], 0))
    return (row, len(line))


def prev_word_start(lines: Sequence[str], cursor: Cursor) -> Cursor:
    row, col = cursor
    if col == 0:
        if row == 0:
            return (0, 0)
        row -= 1
        col = len(lines[row])
    line = lines[row]
    col = min(col, len(line))
    while col > 0 and line[col - 1].isspace():
        col -= 1
    if col == 0:
        return (row, 0)
    cls = char_class(line[col - 1])
    while col > 0 and char_class(line[col - 1]) == cls:
        col -= 1
    return (row, col)


def next_word_end(line: str, col: int) -> int:
    """Column just past the word that follows ``col`` (blanks included)."""

    col = _skip_blank(line, col)
    if col < len(line):
        cls = char_class(line[col])
        while col < len(line) and char_class(line[col]) == cls:
            col += 1
    return col


def prev_word_begin(line: str, col: int) -> int:
    """Column where the word before ``col`` starts (blanks included)."""

    while col > 0 and line[col - 1].isspace():
        col -= 1
    if col > 0:
        cls = char_class(line[col - 1])
        while col > 0 and char_class(line[col - 1]) == cls:
            col -= 1
    return col


__all__ = [
    "CursorMove",
    "char_class",
    "next_word_start",
    "prev_word_start",
    "next_word_end",
    "prev_word_begin",
]
