"""Editor session: one note's buffer, interpreter, and link records."""

from __future__ import annotations

from typing import Iterable, List, Optional

from linkpad.buffer import Buffer
from linkpad.keymaps import KeymapRegistry
from linkpad.links import Link, LinkRow, LinkStore
from linkpad.modes.base_mode import ModeResult
from linkpad.modes.interpreter import CommandInterpreter
from linkpad.modes.state import CommandState, EditorMode
from linkpad.runtime import telemetry


class EditorSession:
    """Aggregate tying the interpreter to the link store.

    After every keystroke that changed the buffer the link store is
    reconciled against the anchor table; a completed link gesture leaves a
    pending anchor that the host binds to a target with :meth:`attach_link`.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        note_id: Optional[int] = None,
        title: str = "",
        links: Optional[LinkStore] = None,
        registry: Optional[KeymapRegistry] = None,
    ) -> None:
        self.buffer = buffer
        self.note_id = note_id
        self.title = title
        self.links = links if links is not None else LinkStore(note_id)
        self.interpreter = CommandInterpreter(buffer, registry=registry)
        self.pending_anchor: Optional[int] = None
        self.saved_version = buffer.version
        self.logger = telemetry.get_logger("linkpad.session")

    @classmethod
    def new(cls, title: str = "", text: str = "", *, max_history: int = 100) -> "EditorSession":
        return cls(Buffer.from_text(text, max_history=max_history), title=title)

    @classmethod
    def from_persisted(
        cls,
        note_id: int,
        title: str,
        body: str,
        rows: Iterable[LinkRow],
        *,
        max_history: int = 100,
    ) -> "EditorSession":
        """Rehydrate a saved note; every link comes back clean and saved."""

        store = LinkStore.from_rows(note_id, rows)
        anchors = {link.text_anchor_id: link.to_anchor() for link in store}
        buffer = Buffer.from_text(
            body, name=f"note-{note_id}", anchors=anchors, max_history=max_history
        )
        return cls(buffer, note_id=note_id, title=title, links=store)

    @property
    def mode(self) -> EditorMode:
        return self.interpreter.mode

    @property
    def command(self) -> CommandState:
        return self.interpreter.command

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def is_dirty(self) -> bool:
        return self.buffer.version != self.saved_version

    def handle_input(self, key: str, modifiers: Iterable[str] = ()) -> ModeResult:
        version = self.buffer.version
        result = self.interpreter.handle_input(key, modifiers)
        if self.buffer.version != version:
            self.links.reconcile(self.buffer.anchors)
        anchor_id = self.buffer.take_new_anchor()
        if anchor_id is not None:
            self._drop_pending_anchor()
            self.pending_anchor = anchor_id
        return result

    def set_search_pattern(self, pattern: Optional[str]) -> bool:
        """Highlight ``pattern`` and jump to its next occurrence."""

        self.buffer.set_search_pattern(pattern)
        if not self.buffer.search_forward():
            return False
        self.interpreter.repeat.record_column(self.buffer)
        return True

    def attach_link(self, linked_note_id: int) -> Optional[Link]:
        """Bind the pending link anchor to ``linked_note_id``."""

        anchor_id, self.pending_anchor = self.pending_anchor, None
        if anchor_id is None:
            return None
        anchor = self.buffer.anchors.get(anchor_id)
        if anchor is None or anchor.deleted:
            self.logger.debug("pending anchor %s vanished before linking", anchor_id)
            return None
        link = self.links.insert(
            Link(
                parent_note_id=self.note_id,
                text_anchor_id=anchor_id,
                linked_note_id=linked_note_id,
                row=anchor.row,
                start_col=anchor.start_col,
                end_col=anchor.end_col,
            )
        )
        telemetry.record_event(
            "links.attached",
            data={"anchor_id": anchor_id, "linked_note_id": linked_note_id},
            logger_name="linkpad.session",
        )
        return link

    def cancel_link(self) -> None:
        self._drop_pending_anchor()

    def link_at_cursor(self) -> Optional[Link]:
        return self.links.link_at(self.buffer.cursor)

    def persistable_links(self) -> List[LinkRow]:
        return self.links.rows()

    def bind_note(self, note_id: Optional[int]) -> None:
        self.note_id = note_id
        self.links.bind_parent(note_id)

    def mark_saved(self) -> None:
        self.saved_version = self.buffer.version

    def _drop_pending_anchor(self) -> None:
        if self.pending_anchor is not None:
            self.buffer.anchors.remove(self.pending_anchor)
            self.pending_anchor = None


__all__ = ["EditorSession"]
