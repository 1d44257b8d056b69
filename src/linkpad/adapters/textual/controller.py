"""Textual adapter that feeds key events to an editor session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

from linkpad.buffer import BufferMirror
from linkpad.modes import EditorMode, ModeResult
from linkpad.runtime import telemetry
from linkpad.session import EditorSession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    request_link_target: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Bridges an :class:`EditorSession` to a Textual-friendly surface."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.hooks = hooks
        self.logger = telemetry.get_logger("linkpad.adapters.textual")
        self.session: EditorSession | None = None
        self.attach(session)

    def attach(self, session: EditorSession) -> None:
        """Swap in another note's session and subscribe to its mode changes."""

        previous = self.session
        if previous is not None:
            previous.interpreter.context.bus.unsubscribe("mode_changed", self._on_mode_changed)
        self.session = session
        session.interpreter.context.bus.subscribe("mode_changed", self._on_mode_changed)
        self.refresh()
        self.hooks.update_status(self.status_line())

    def handle_textual_key(self, key: str, *, modifiers: Iterable[str] = ()) -> ModeResult:
        self._log_state("key ->", key=key, mods=tuple(modifiers))
        result = self.session.handle_input(key, modifiers)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        self.refresh()
        self.hooks.update_status(self.status_line(result))
        if self.session.pending_anchor is not None:
            self.hooks.request_link_target()
        return result

    def refresh(self) -> None:
        self.hooks.update_buffer(self.session.buffer.mirror(attributes=self._attributes()))

    def status_line(self, result: ModeResult | None = None) -> str:
        session = self.session
        parts = [session.interpreter.status_label]
        parts.append(session.title or "[untitled]")
        if session.is_dirty:
            parts.append("+")
        link = session.link_at_cursor()
        if link is not None and session.mode is EditorMode.NORMAL:
            parts.append(f"-> note {link.linked_note_id} (enter)")
        if result is not None and result.status == "aborted":
            parts.append("(cancelled)")
        return "  ".join(parts)

    def _attributes(self) -> Dict[str, str]:
        return {
            "mode": self.session.mode.value,
            "title": self.session.title,
            "links": str(len(self.session.links.live())),
        }

    def _on_mode_changed(self, payload: object | None) -> None:
        self._log_state("event ->", event="mode_changed", payload=payload)

    def _log_state(self, prefix: str, **fields: object) -> None:
        buffer = self.session.buffer
        snapshot: Dict[str, object] = {
            "mode": self.session.mode.value,
            "cursor": buffer.cursor,
            "selection": buffer.state.selection,
            "buffer_version": buffer.version,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        line = " ".join([prefix, *(f"{key}={value!r}" for key, value in snapshot.items())])
        self.logger.debug(line)
        self.hooks.log(line)


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
