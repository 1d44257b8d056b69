"""Per-session map of link records kept in step with the anchor table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from linkpad.buffer import AnchorTable, Cursor
from linkpad.runtime import telemetry

from .models import Link, LinkRow


class LinkInvariantError(AssertionError):
    """Raised when the link store and the anchor table disagree on identity."""


@dataclass(frozen=True, slots=True)
class LinkDiff:
    """Disjoint partition of the store into the three write legs."""

    to_update: Tuple[Link, ...] = ()
    to_insert: Tuple[Link, ...] = ()
    to_delete: Tuple[Link, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.to_update or self.to_insert or self.to_delete)

    def counts(self) -> Dict[str, int]:
        return {
            "update": len(self.to_update),
            "insert": len(self.to_insert),
            "delete": len(self.to_delete),
        }


class LinkStore:
    """Link records for one note, keyed by text anchor id."""

    def __init__(
        self, parent_note_id: Optional[int] = None, links: Iterable[Link] = ()
    ) -> None:
        self.parent_note_id = parent_note_id
        self._links: Dict[int, Link] = {}
        self.logger = telemetry.get_logger("linkpad.links.store")
        for link in links:
            self.insert(link)

    @classmethod
    def from_rows(cls, parent_note_id: int, rows: Iterable[LinkRow]) -> "LinkStore":
        store = cls(parent_note_id)
        for row in rows:
            if row.parent_note_id != parent_note_id:
                raise LinkInvariantError(
                    f"Row for anchor {row.text_anchor_id} belongs to note {row.parent_note_id}"
                )
            store.insert(Link.from_row(row))
        return store

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[Link]:
        return iter(self._links.values())

    def __contains__(self, text_anchor_id: object) -> bool:
        return text_anchor_id in self._links

    def get(self, text_anchor_id: int) -> Optional[Link]:
        return self._links.get(text_anchor_id)

    @property
    def has_records(self) -> bool:
        return bool(self._links)

    def live(self) -> List[Link]:
        return [link for link in self._links.values() if not link.deleted]

    def insert(self, link: Link) -> Link:
        if link.text_anchor_id in self._links:
            raise LinkInvariantError(f"Anchor {link.text_anchor_id} already linked")
        if link.parent_note_id is None:
            link.parent_note_id = self.parent_note_id
        self._links[link.text_anchor_id] = link
        return link

    def bind_parent(self, parent_note_id: Optional[int]) -> None:
        """Attach every record to a note being saved for the first time.

        ``None`` detaches them again when that first save is rolled back.
        """

        self.parent_note_id = parent_note_id
        for link in self._links.values():
            link.parent_note_id = parent_note_id

    def reconcile(self, anchors: AnchorTable) -> int:
        """Pull deletions and geometry drift from ``anchors``; returns changes."""

        changed = 0
        for link in self._links.values():
            anchor = anchors.get(link.text_anchor_id)
            if anchor is None:
                raise LinkInvariantError(
                    f"Link anchor {link.text_anchor_id} missing from the anchor table"
                )
            if anchor.deleted:
                if not link.deleted:
                    link.deleted = True
                    changed += 1
            elif link.moved(anchor):
                link.follow(anchor)
                changed += 1
        if changed:
            self.logger.debug("reconciled %d link(s)", changed)
        return changed

    def classify(self) -> LinkDiff:
        to_update: List[Link] = []
        to_insert: List[Link] = []
        to_delete: List[Link] = []
        for link in self._links.values():
            if link.deleted:
                if link.saved:
                    to_delete.append(link)
            elif not link.saved:
                to_insert.append(link)
            elif link.updated:
                to_update.append(link)
        return LinkDiff(tuple(to_update), tuple(to_insert), tuple(to_delete))

    def apply_commit(self, diff: LinkDiff) -> None:
        """Fold a committed diff back into the records."""

        for link in diff.to_insert + diff.to_update:
            link.saved = True
            link.updated = False
        for link in diff.to_delete:
            self._links.pop(link.text_anchor_id, None)
        for anchor_id in [
            link.text_anchor_id
            for link in self._links.values()
            if link.deleted and not link.saved
        ]:
            del self._links[anchor_id]

    def link_at(self, cursor: Cursor) -> Optional[Link]:
        row, col = cursor
        for link in self._links.values():
            if link.deleted:
                continue
            if link.row == row and link.start_col <= col < link.end_col:
                return link
        return None

    def rows(self) -> List[LinkRow]:
        return [link.to_row() for link in self.live()]


__all__ = ["LinkStore", "LinkDiff", "LinkInvariantError"]
