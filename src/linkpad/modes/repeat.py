"""Repeat-count arithmetic and horizontal column memory."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from linkpad.buffer import Buffer, CursorMove
from linkpad.runtime import telemetry

VERTICAL_MOVES = frozenset(
    {CursorMove.UP, CursorMove.DOWN, CursorMove.TOP, CursorMove.BOTTOM}
)


def count_from_digits(digits: Sequence[int]) -> int:
    """Base-10 value of ``digits`` in typed order; no digits means one."""

    if not digits:
        return 1
    count = 0
    for digit in digits:
        count = count * 10 + digit
    return count


class RepeatEngine:
    """Applies an action ``count`` times and remembers the preferred column.

    Horizontal moves record the column they land on; vertical moves restore
    it on the destination line, snapping to the line end when the line is
    shorter.
    """

    def __init__(self) -> None:
        self.column: Optional[int] = None
        self.logger = telemetry.get_logger("linkpad.modes.repeat")

    def repeat(self, digits: Sequence[int], action: Callable[[], object]) -> int:
        count = count_from_digits(digits)
        for _ in range(count):
            action()
        if count > 1:
            self.logger.debug("repeated action %d times", count)
        return count

    def record_column(self, buffer: Buffer) -> None:
        self.column = buffer.cursor[1]

    def restore_column(self, buffer: Buffer) -> None:
        row, col = buffer.cursor
        buffer.jump(row, col if self.column is None else self.column)

    def move(self, buffer: Buffer, move: CursorMove, digits: Sequence[int] = ()) -> int:
        """Run a cursor motion ``count`` times with column memory applied."""

        if move in VERTICAL_MOVES:
            if self.column is None:
                self.record_column(buffer)
            count = self.repeat(digits, lambda: buffer.move_cursor(move))
            self.restore_column(buffer)
        else:
            count = self.repeat(digits, lambda: buffer.move_cursor(move))
            self.record_column(buffer)
        return count


__all__ = ["RepeatEngine", "count_from_digits", "VERTICAL_MOVES"]
