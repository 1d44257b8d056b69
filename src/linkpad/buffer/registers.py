"""Yank register storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(slots=True)
class RegisterValue:
    text: str
    type: str = "character"  # character or line


class RegisterBank:
    """Tracks the unnamed register plus any named ones a host wants."""

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {'"': RegisterValue(text="")}

    def get(self, name: str = '"') -> RegisterValue:
        return self._registers.get(name, RegisterValue(text=""))

    def set(self, name: str, value: RegisterValue) -> None:
        self._registers[name] = value
        if name != '"':
            self._registers['"'] = value

    def yank_to(
        self, name: str, text: str, *, register_type: str = "character"
    ) -> None:
        self.set(name, RegisterValue(text=text, type=register_type))


__all__ = ["RegisterBank", "RegisterValue"]
