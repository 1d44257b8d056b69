"""Immediate Normal-mode edits: paste, history, deletes, and search steps."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.modes.base_mode import ModeContext, ModeResult
from linkpad.modes.state import EditorMode

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def _status(changed: bool, message: str) -> ModeResult:
    return ModeResult(consumed=True, status="ok" if changed else "noop", message=message)


def _search_step(context: ModeContext, moved: bool, message: str) -> ModeResult:
    if moved:
        context.repeat.record_column(context.buffer)
    return _status(moved, message)


def paste(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _status(context.buffer.paste(), "paste")


def undo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _status(context.buffer.undo(), "undo")


def redo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _status(context.buffer.redo(), "redo")


def delete_next_char(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.repeat.repeat(context.pending.num_buf, context.buffer.delete_next_char)
    return ModeResult(consumed=True, message="delete_next_char")


def delete_to_line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _status(context.buffer.delete_line_by_end(), "delete_to_line_end")


def change_to_line_end(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.delete_line_by_end()
    return ModeResult(consumed=True, switch_to=EditorMode.INSERT, message="change")


def search_next(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _search_step(context, context.buffer.search_forward(), "search_next")


def search_previous(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _search_step(context, context.buffer.search_back(), "search_previous")


__all__ = [
    "paste",
    "undo",
    "redo",
    "delete_next_char",
    "delete_to_line_end",
    "change_to_line_end",
    "search_next",
    "search_previous",
]
