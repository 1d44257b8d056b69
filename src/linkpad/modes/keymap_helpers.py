"""Helper utilities for turning host key events into binding tokens."""

from __future__ import annotations

from typing import Iterable

from .base_mode import KeyInput

KEY_ALIASES = {
    "esc": "escape",
    "<esc>": "escape",
    "return": "enter",
    "ctrl+m": "enter",
    "ctrl+i": "tab",
    "ctrl+h": "backspace",
    "circumflex_accent": "^",
    "dollar_sign": "$",
    "less_than_sign": "<",
    "equals_sign": "=",
    "greater_than_sign": ">",
    "space": " ",
}


def make_key_input(key: str, modifiers: Iterable[str] = ()) -> KeyInput:
    mods = tuple(m.lower() for m in modifiers if m)
    return KeyInput(key=key, modifiers=mods)


def key_to_token(key: KeyInput) -> str:
    name = key.key if len(key.key) == 1 else key.key.lower()
    if key.modifiers:
        modifier = "+".join(key.modifiers)
        name = f"{modifier}+{name}"
    return KEY_ALIASES.get(name, name)


def is_printable(token: str) -> bool:
    return len(token) == 1 and token.isprintable()


__all__ = ["KEY_ALIASES", "make_key_input", "key_to_token", "is_printable"]
