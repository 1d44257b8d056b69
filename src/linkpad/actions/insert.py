"""Insert-mode keys that are not plain text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.buffer import CursorMove
from linkpad.modes.base_mode import ModeContext, ModeResult

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def newline(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.insert_newline()
    return ModeResult(consumed=True)


def backspace(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.delete_char()
    return ModeResult(consumed=True)


def delete_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.delete_next_char()
    return ModeResult(consumed=True)


def tab(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.insert_tab()
    return ModeResult(consumed=True)


def _move(context: ModeContext, move: CursorMove) -> ModeResult:
    context.repeat.move(context.buffer, move)
    return ModeResult(consumed=True)


def arrow_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.BACK)


def arrow_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.FORWARD)


def arrow_up(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.UP)


def arrow_down(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.DOWN)


def home(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.HEAD)


def end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _move(context, CursorMove.END)


__all__ = [
    "newline",
    "backspace",
    "delete_forward",
    "tab",
    "arrow_left",
    "arrow_right",
    "arrow_up",
    "arrow_down",
    "home",
    "end",
]
