"""Counted cursor motions routed through the repeat engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.buffer import CursorMove
from linkpad.modes.base_mode import ModeContext, ModeResult

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def _counted(context: ModeContext, move: CursorMove) -> ModeResult:
    count = context.repeat.move(context.buffer, move, context.pending.num_buf)
    return ModeResult(consumed=True, message=f"{move.value}x{count}")


def move_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.BACK)


def move_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.FORWARD)


def move_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.UP)


def move_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.DOWN)


def word_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.WORD_FORWARD)


def word_back(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _counted(context, CursorMove.WORD_BACK)


def line_head(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(CursorMove.HEAD)
    context.repeat.record_column(context.buffer)
    return ModeResult(consumed=True, message=CursorMove.HEAD.value)


def line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(CursorMove.END)
    context.repeat.record_column(context.buffer)
    return ModeResult(consumed=True, message=CursorMove.END.value)


def buffer_bottom(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    buffer.jump(buffer.document.last_row, 0)
    context.repeat.record_column(buffer)
    return ModeResult(consumed=True, message=CursorMove.BOTTOM.value)


__all__ = [
    "move_left",
    "move_right",
    "move_up",
    "move_down",
    "word_forward",
    "word_back",
    "line_head",
    "line_end",
    "buffer_bottom",
]
