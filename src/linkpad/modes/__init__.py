"""Modal state, pending input, and the repeat engine.

The interpreter lives in ``linkpad.modes.interpreter`` and is imported from
there; the keymap defaults depend on this package.
"""

from .base_mode import KeyInput, ModeBus, ModeContext, ModeResult
from .repeat import RepeatEngine, count_from_digits
from .state import CommandState, EditorMode, PendingInput

__all__ = [
    "CommandState",
    "EditorMode",
    "KeyInput",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "PendingInput",
    "RepeatEngine",
    "count_from_digits",
]
