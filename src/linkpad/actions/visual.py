"""Visual-mode actions operating on the current selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from linkpad.buffer import Alignment
from linkpad.modes.base_mode import ModeContext, ModeResult
from linkpad.modes.state import EditorMode

if TYPE_CHECKING:
    from linkpad.keymaps.registry import ResolutionMatch


def copy_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.copy()
    return ModeResult(consumed=True, switch_to=EditorMode.NORMAL, message="copy")


def cut_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    context.buffer.cut()
    return ModeResult(consumed=True, switch_to=EditorMode.NORMAL, message="cut")


def _align(context: ModeContext, alignment: Alignment) -> ModeResult:
    context.buffer.set_alignment(alignment)
    return ModeResult(consumed=True, message=f"align_{alignment.value}")


def align_left(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _align(context, Alignment.LEFT)


def align_center(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _align(context, Alignment.CENTER)


def align_right(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    return _align(context, Alignment.RIGHT)


def anchor_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Turn the selection into a link anchor; the session picks it up."""

    del match
    anchor_id = context.buffer.anchor_selection()
    if anchor_id is None:
        return ModeResult(
            consumed=True, switch_to=EditorMode.NORMAL, status="noop", message="link"
        )
    return ModeResult(
        consumed=True, switch_to=EditorMode.NORMAL, message=f"link_anchor:{anchor_id}"
    )


__all__ = [
    "copy_selection",
    "cut_selection",
    "align_left",
    "align_center",
    "align_right",
    "anchor_selection",
]
