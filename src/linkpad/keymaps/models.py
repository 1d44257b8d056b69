"""Dataclasses describing keymap bindings and action metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

MODIFIER_ORDER = ("ctrl", "alt", "shift")


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = {m.strip().lower() for m in modifiers if m.strip()}
    ordered = [m for m in MODIFIER_ORDER if m in values]
    ordered.extend(sorted(values.difference(MODIFIER_ORDER)))
    return tuple(ordered)


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press; ``token`` is what bindings are keyed on."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """Split ``ctrl+l`` style tokens; a bare ``+`` stays a key."""

        if len(token) > 1 and "+" in token.rstrip("+"):
            *modifiers, key = token.split("+")
            if not key:
                key = "+"
            return cls(key=key, modifiers=tuple(modifiers))
        return cls(key=token)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates one keystroke in one mode with an action."""

    id: str
    mode: str
    stroke: KeyStroke
    action_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")

    @property
    def key_signature(self) -> str:
        return self.stroke.token

    @classmethod
    def for_key(
        cls, mode: str, key: str, action_id: str, *, description: str = ""
    ) -> "Binding":
        stroke = KeyStroke.parse(key)
        return cls(
            id=f"{mode}.{stroke.token}",
            mode=mode,
            stroke=stroke,
            action_id=action_id,
            description=description,
        )


__all__ = ["KeyStroke", "ActionRef", "Binding"]
