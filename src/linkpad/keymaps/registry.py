"""Keymap registry mapping ``(mode, token)`` pairs to named actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

from linkpad.runtime.telemetry import span

from .models import ActionRef, Binding

Slot = Tuple[str, str]


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """A binding found for a keystroke, paired with the action it names."""

    binding: Binding
    action: ActionRef


class KeymapConflictError(RuntimeError):
    """The keystroke is already bound in that mode."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        taken = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"'{binding.key_signature}' in {binding.mode} mode is taken by {taken}"
        )


class KeymapRegistry:
    """Named actions plus at most one binding per keystroke and mode."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._slots: Dict[Slot, str] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        if action_id not in self._actions:
            raise KeyError(f"Action '{action_id}' is not registered")
        return self._actions[action_id]

    def get_binding(self, binding_id: str) -> Binding:
        if binding_id not in self._bindings:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return self._bindings[binding_id]

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Bind ``binding``; with ``replace`` whatever held its slot or id is dropped."""

        with span(
            "keymaps::bind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            if binding.action_id not in self._actions:
                raise KeyError(
                    f"Binding '{binding.id}' names unknown action '{binding.action_id}'"
                )
            conflict = self.detect_conflict(binding)
            if not replace:
                if conflict is not None:
                    handle.add_metadata("conflict", conflict.id)
                    raise KeymapConflictError(binding, (conflict,))
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
            for stale in (conflict, self._bindings.get(binding.id)):
                if stale is not None:
                    self._drop(stale)
            self._bindings[binding.id] = binding
            self._slots[self._slot(binding)] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is None:
            return None
        self._drop(binding)
        self._revision += 1
        return binding

    def lookup(self, mode: str, token: str) -> Optional[ResolutionMatch]:
        binding_id = self._slots.get((mode, token))
        if binding_id is None:
            return None
        binding = self._bindings[binding_id]
        return ResolutionMatch(binding, self._actions[binding.action_id])

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if mode is None or binding.mode == mode:
                yield binding

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            modes=tuple(sorted({mode for mode, _token in self._slots})),
        )

    def detect_conflict(self, binding: Binding) -> Optional[Binding]:
        holder = self._slots.get(self._slot(binding))
        if holder is None or holder == binding.id:
            return None
        return self._bindings[holder]

    @staticmethod
    def _slot(binding: Binding) -> Slot:
        return (binding.mode, binding.key_signature)

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        slot = self._slot(binding)
        if self._slots.get(slot) == binding.id:
            del self._slots[slot]


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "ResolutionMatch",
]
