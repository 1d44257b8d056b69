"""Buffer abstractions: text, cursor, anchors, registers, and undo history."""

from .anchors import Anchor, AnchorTable
from .buffer import Buffer, Transaction
from .document import BufferDocument, Cursor
from .motions import CursorMove
from .registers import RegisterBank, RegisterValue
from .state import Alignment, BufferState, Selection
from .sync import BufferMirror, BufferValidationError
from .undo import UndoEntry, UndoTimeline
from .validation import clamp_cursor, ensure_cursor

__all__ = [
    "Alignment",
    "Anchor",
    "AnchorTable",
    "Buffer",
    "BufferDocument",
    "BufferMirror",
    "BufferState",
    "BufferValidationError",
    "Cursor",
    "CursorMove",
    "RegisterBank",
    "RegisterValue",
    "Selection",
    "Transaction",
    "UndoEntry",
    "UndoTimeline",
    "clamp_cursor",
    "ensure_cursor",
]
