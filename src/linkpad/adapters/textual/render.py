"""Turn a buffer mirror into styled Rich text for the editor widget."""

from __future__ import annotations

from rich.text import Text

from linkpad.buffer import Alignment, BufferMirror, Cursor

LINK_STYLE = "underline bold cyan"
SELECTION_STYLE = "reverse"
CURSOR_STYLE = "reverse blink"
SEARCH_STYLE = "black on yellow"
HOP_STYLE = "bold magenta"

JUSTIFY = {
    Alignment.LEFT: "left",
    Alignment.CENTER: "center",
    Alignment.RIGHT: "right",
}


def _offsets(lines: list[str]) -> list[int]:
    starts = []
    running = 0
    for line in lines:
        starts.append(running)
        running += len(line) + 1
    return starts


def _offset(starts: list[int], cursor: Cursor) -> int:
    row, col = cursor
    return starts[row] + col


def render_mirror(mirror: BufferMirror) -> Text:
    """Style links, selection, search hits, hop targets, and the cursor."""

    plain = mirror.text
    lines = plain.split("\n")
    starts = _offsets(lines)
    # Trailing space gives the cursor a cell to sit on at end of buffer.
    text = Text(plain + " ", justify=JUSTIFY[mirror.alignment])

    for _anchor_id, row, start_col, end_col in mirror.anchors:
        if row < len(lines):
            base = starts[row]
            text.stylize(LINK_STYLE, base + start_col, base + end_col)

    if mirror.selection is not None:
        start, (end_row, end_col) = mirror.selection
        text.stylize(
            SELECTION_STYLE,
            _offset(starts, start),
            _offset(starts, (end_row, end_col)) + 1,
        )

    search = mirror.search_pattern
    if search:
        index = plain.find(search)
        while index != -1:
            text.stylize(SEARCH_STYLE, index, index + len(search))
            index = plain.find(search, index + 1)

    for cursor in mirror.hop_matches:
        offset = _offset(starts, cursor)
        text.stylize(HOP_STYLE, offset, offset + 2)

    cursor_offset = _offset(starts, mirror.cursor)
    text.stylize(CURSOR_STYLE, cursor_offset, cursor_offset + 1)
    return text


__all__ = ["render_mirror"]
