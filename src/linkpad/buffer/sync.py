"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .document import Cursor
from .state import Alignment, Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Cursor
    selection: Optional[Selection]
    alignment: Alignment = Alignment.LEFT
    search_pattern: Optional[str] = None
    anchors: tuple[tuple[int, int, int, int], ...] = ()
    hop_matches: tuple[Cursor, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when callers provide out-of-bounds cursor info."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


__all__ = ["BufferMirror", "BufferValidationError"]
