"""Operator openers: each one arms a pending multi-key command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.modes.base_mode import ModeContext, ModeResult
from linkpad.modes.state import CommandState

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def _open(context: ModeContext, char: str, state: CommandState) -> ModeResult:
    context.pending.push_command(char)
    return ModeResult(consumed=True, command=state, status="pending", message=state.value)


def open_delete(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _open(context, "d", CommandState.DELETE)


def open_yank(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _open(context, "y", CommandState.YANK)


def open_goto(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _open(context, "g", CommandState.GOTO)


def open_find_forward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _open(context, "f", CommandState.FIND_FORWARD)


def open_find_backward(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _open(context, "F", CommandState.FIND_BACKWARD)


def open_hop(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    # cmd_buf collects the two search characters, not the opener.
    del context, match
    return ModeResult(
        consumed=True,
        command=CommandState.PRIME_HOP,
        status="pending",
        message=CommandState.PRIME_HOP.value,
    )


__all__ = [
    "open_delete",
    "open_yank",
    "open_goto",
    "open_find_forward",
    "open_find_backward",
    "open_hop",
]
