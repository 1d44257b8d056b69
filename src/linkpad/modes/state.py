"""Closed mode and pending-command vocabularies plus the pending input buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class EditorMode(str, Enum):
    INSERT = "insert"
    NORMAL = "normal"
    VISUAL = "visual"


class CommandState(str, Enum):
    """Which multi-key command, if any, is waiting for its next key."""

    NO_COMMAND = "no_command"
    DELETE = "delete"
    YANK = "yank"
    GOTO = "goto"
    FIND_FORWARD = "find_forward"
    FIND_BACKWARD = "find_backward"
    PRIME_HOP = "prime_hop"
    EXECUTE_HOP = "execute_hop"


@dataclass(slots=True)
class PendingInput:
    """Digits typed as a repeat count plus the command characters seen so far."""

    num_buf: List[int] = field(default_factory=list)
    cmd_buf: List[str] = field(default_factory=list)

    def push_digit(self, digit: int) -> None:
        self.num_buf.append(digit)

    def push_command(self, char: str) -> None:
        self.cmd_buf.append(char)

    @property
    def command_text(self) -> str:
        return "".join(self.cmd_buf)

    def clear(self) -> None:
        self.num_buf.clear()
        self.cmd_buf.clear()

    def is_empty(self) -> bool:
        return not self.num_buf and not self.cmd_buf


__all__ = ["EditorMode", "CommandState", "PendingInput"]
