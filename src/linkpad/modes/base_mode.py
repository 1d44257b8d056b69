"""Shared types every mode handler and action works with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from linkpad.buffer import Buffer, RegisterBank

from .repeat import RepeatEngine
from .state import CommandState, EditorMode, PendingInput


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to the interpreter."""

    key: str
    modifiers: Tuple[str, ...] = ()


@dataclass(slots=True)
class ModeResult:
    """Status record returned for each handled key.

    ``switch_to`` asks the interpreter to change mode; ``command`` opens a
    pending multi-key command and keeps the pending input alive.
    """

    consumed: bool
    switch_to: Optional[EditorMode] = None
    command: Optional[CommandState] = None
    status: str = "ok"
    message: Optional[str] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every action can access."""

    buffer: Buffer
    registers: RegisterBank
    bus: "ModeBus"
    pending: PendingInput = field(default_factory=PendingInput)
    repeat: RepeatEngine = field(default_factory=RepeatEngine)


class ModeBus:
    """Minimal event bus letting the interpreter publish structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = ["KeyInput", "ModeResult", "ModeContext", "ModeBus"]
