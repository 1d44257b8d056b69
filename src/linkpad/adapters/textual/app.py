"""Executable Textual app hosting the linkpad editor."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Input, Static

from linkpad.buffer import BufferMirror
from linkpad.config import Settings
from linkpad.modes import EditorMode
from linkpad.notes import NoteService
from linkpad.runtime import telemetry
from linkpad.session import EditorSession
from linkpad.storage import NoteStorageError

from .controller import TextualEditorAdapter, TextualUIHooks
from .render import render_mirror

HOST_KEYS = frozenset({"ctrl+q", "ctrl+c", "ctrl+s", "ctrl+f", "ctrl+t", "ctrl+n", "ctrl+b"})

PROMPTS = {
    "link": "Link to note titled:",
    "search": "Search for:",
    "title": "Note title:",
}


@dataclass
class UIState:
    status_text: str = ""
    prompt_kind: Optional[str] = None


def normalize_key(event: events.Key) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """Map a Textual key event to ``(key, modifiers)`` or ``None`` for host keys."""

    if event.key in HOST_KEYS:
        return None
    if event.is_printable and event.character:
        return (event.character, ())
    return (event.key, ())


class LinkpadApp(App[None]):
    """Single-note editor view with a status line and a one-line prompt."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#prompt {
		display: none;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+f", "search", "Search"),
        ("ctrl+t", "rename", "Title"),
        ("ctrl+n", "new_note", "New"),
        ("ctrl+b", "back", "Back"),
    ]

    def __init__(self, service: NoteService, *, note_id: Optional[int] = None) -> None:
        super().__init__()
        self.service = service
        self._initial_note_id = note_id
        self._state = UIState()
        self._history: List[int] = []
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._prompt_widget: Input | None = None
        self.logger = telemetry.get_logger("linkpad.adapters.textual.app")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        self._prompt_widget = Input(id="prompt")
        yield self._prompt_widget
        yield Footer()

    def on_mount(self) -> None:
        session = EditorSession.new(max_history=self.service.max_history)
        if self._initial_note_id is not None:
            try:
                session = self.service.load(self._initial_note_id)
            except NoteStorageError as exc:
                self._update_status(str(exc))
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            request_link_target=lambda: self._open_prompt("link"),
        )
        self.adapter = TextualEditorAdapter(session, hooks)
        self._refresh_title()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if self._state.prompt_kind is not None:
            if event.key == "escape":
                self._close_prompt(cancelled=True)
                event.stop()
            return
        normalized = normalize_key(event)
        if normalized is None:
            return
        key, modifiers = normalized
        session = self.adapter.session
        if key == "enter" and session.mode is EditorMode.NORMAL:
            link = session.link_at_cursor()
            if link is not None:
                self._follow(link.linked_note_id)
                event.stop()
                return
        self.adapter.handle_textual_key(key, modifiers=modifiers)
        event.stop()

    def on_input_submitted(self, message: Input.Submitted) -> None:
        kind = self._state.prompt_kind
        value = message.value
        self._close_prompt(cancelled=False)
        if not self.adapter or kind is None:
            return
        session = self.adapter.session
        if kind == "link":
            try:
                link = self.service.create_linked_note(session, value)
            except (NoteStorageError, ValueError) as exc:
                session.cancel_link()
                self._update_status(f"Link not created: {exc}")
            else:
                if link is not None:
                    self._update_status(f"Linked to note {link.linked_note_id}")
        elif kind == "search":
            if not session.set_search_pattern(value):
                self._update_status(f"Not found: {value}")
        elif kind == "title":
            session.title = value.strip()
            self._refresh_title()
        self.adapter.refresh()

    def action_save(self) -> None:
        if not self.adapter:
            return
        outcome = self.service.save(self.adapter.session)
        self._update_status(outcome.message)
        if not outcome.ok and not self.adapter.session.title:
            self._open_prompt("title")
        self._refresh_title()

    def action_search(self) -> None:
        self._open_prompt("search")

    def action_rename(self) -> None:
        self._open_prompt("title")

    def action_new_note(self) -> None:
        if self.adapter:
            self.adapter.attach(EditorSession.new(max_history=self.service.max_history))
            self._refresh_title()

    def action_back(self) -> None:
        if self._history:
            self._follow(self._history.pop(), remember=False)

    def _follow(self, note_id: int, *, remember: bool = True) -> None:
        if not self.adapter:
            return
        current = self.adapter.session
        if current.is_dirty:
            outcome = self.service.save(current)
            if not outcome.ok:
                self._update_status(outcome.message)
                return
        try:
            session = self.service.load(note_id)
        except NoteStorageError as exc:
            self._update_status(str(exc))
            return
        if remember and current.note_id is not None:
            self._history.append(current.note_id)
        self.adapter.attach(session)
        self._refresh_title()

    def _open_prompt(self, kind: str) -> None:
        self._state.prompt_kind = kind
        self._update_status(PROMPTS[kind])
        if self._prompt_widget:
            self._prompt_widget.value = ""
            self._prompt_widget.display = True
            self._prompt_widget.focus()

    def _close_prompt(self, *, cancelled: bool) -> None:
        kind, self._state.prompt_kind = self._state.prompt_kind, None
        if cancelled and kind == "link" and self.adapter:
            self.adapter.session.cancel_link()
            self._update_status("Link cancelled")
        if self._prompt_widget:
            self._prompt_widget.display = False
        if self._buffer_widget:
            self._buffer_widget.focus()

    def _refresh_title(self) -> None:
        if self.adapter:
            self.title = self.adapter.session.title or "linkpad"

    def _update_buffer(self, mirror: BufferMirror) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_mirror(mirror))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the linkpad note editor.")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database file (default: $LINKPAD_DB_PATH or notes.db)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="Logging preset (default: $LINKPAD_LOG_PRESET or quiet)",
    )
    parser.add_argument(
        "--note",
        type=int,
        default=None,
        help="Open the note with this id",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    settings = Settings.from_env()
    if args.db is not None:
        settings = replace(settings, db_path=args.db)
    if args.log_preset is not None:
        settings = replace(settings, log_preset=args.log_preset)
    telemetry.configure(preset=settings.log_preset)
    app = LinkpadApp(NoteService.from_settings(settings), note_id=args.note)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
