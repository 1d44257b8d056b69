"""Mode-switch actions shared by Normal and Visual bindings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.buffer import CursorMove
from linkpad.modes.base_mode import ModeContext, ModeResult
from linkpad.modes.state import EditorMode

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="enter_insert")


def append_after_cursor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(CursorMove.FORWARD)
    context.repeat.record_column(context.buffer)
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="enter_insert")


def append_at_line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(CursorMove.END)
    context.repeat.record_column(context.buffer)
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="enter_insert")


def insert_at_line_head(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.move_cursor(CursorMove.HEAD)
    context.repeat.record_column(context.buffer)
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="enter_insert")


def open_line_below(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.open_line_below()
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="open_line")


def open_line_above(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.open_line_above()
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="open_line")


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, switch_to=EditorMode.NORMAL, message="exit")


def enter_visual_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, switch_to=EditorMode.VISUAL, message="enter_visual")


def enter_visual_line_mode(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Select the whole cursor line, leaving the cursor on its last character."""

    del match
    buffer = context.buffer
    row, _ = buffer.cursor
    buffer.jump(row, 0)
    buffer.start_selection()
    buffer.jump(row, max(len(buffer.line(row)) - 1, 0))
    return ModeResult(consumed=True, switch_to=EditorMode.VISUAL, message="enter_visual")


def noop_action(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del context, match
    return ModeResult(consumed=True, status="noop")


__all__ = [
    "enter_insert_mode",
    "append_after_cursor",
    "append_at_line_end",
    "insert_at_line_head",
    "open_line_below",
    "open_line_above",
    "exit_to_normal_mode",
    "enter_visual_mode",
    "enter_visual_line_mode",
    "noop_action",
]
