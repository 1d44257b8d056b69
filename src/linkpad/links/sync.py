"""All-or-nothing reconciliation of a link store against persisted rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence, Tuple

from linkpad.runtime import telemetry

from .models import Link
from .store import LinkDiff, LinkInvariantError, LinkStore


class LinkTransaction(Protocol):
    """The slice of a database session the synchronizer drives."""

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...


Leg = Callable[[LinkTransaction, int, Sequence[Link]], None]
NoteLeg = Callable[[LinkTransaction], None]


class LinkBackend(Protocol):
    """Storage that can apply the three link legs inside one transaction."""

    def begin(self) -> LinkTransaction:
        ...

    def update_links(
        self, tx: LinkTransaction, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        ...

    def insert_links(
        self, tx: LinkTransaction, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        ...

    def delete_links(
        self, tx: LinkTransaction, parent_note_id: int, links: Sequence[Link]
    ) -> None:
        ...


class LinkSyncError(RuntimeError):
    """A leg or the commit failed; nothing was persisted."""

    def __init__(self, failures: Dict[str, BaseException]) -> None:
        self.failures = dict(failures)
        detail = "; ".join(f"{leg}: {exc}" for leg, exc in self.failures.items())
        super().__init__(f"Link sync failed ({detail})")

    @property
    def legs(self) -> Tuple[str, ...]:
        return tuple(self.failures)


@dataclass(frozen=True, slots=True)
class SyncReport:
    updated: int = 0
    inserted: int = 0
    deleted: int = 0

    @property
    def writes(self) -> int:
        return self.updated + self.inserted + self.deleted


class LinkSynchronizer:
    """Runs the update, insert, and delete legs in a single transaction.

    Every leg runs even after another fails so the raised
    :class:`LinkSyncError` names all of them. On any failure the transaction
    is rolled back and the store is left exactly as it was, so a retry
    submits the identical diff.

    A ``note_leg`` runs first inside the same transaction; it writes the
    parent note row (and binds a fresh note id) so the note and its links
    commit or roll back together. When it fails the link legs are skipped.
    """

    def __init__(self, backend: LinkBackend) -> None:
        self.backend = backend
        self.logger = telemetry.get_logger("linkpad.links.sync")

    def sync(self, store: LinkStore, *, note_leg: Optional[NoteLeg] = None) -> SyncReport:
        diff = store.classify()
        if diff.is_empty and note_leg is None:
            store.apply_commit(diff)
            return SyncReport()
        if note_leg is None and store.parent_note_id is None:
            raise LinkInvariantError("Cannot sync links of an unsaved note")

        with telemetry.span(
            "links::sync",
            logger_name="linkpad.links.sync",
            component="links",
            metadata={"note_id": store.parent_note_id, **diff.counts()},
        ) as handle:
            self._run(store, diff, note_leg)
            handle.add_metadata("committed", True)

        store.apply_commit(diff)
        telemetry.record_event(
            "links.synced",
            data={"note_id": store.parent_note_id, **diff.counts()},
            logger_name="linkpad.links.sync",
        )
        return SyncReport(
            updated=len(diff.to_update),
            inserted=len(diff.to_insert),
            deleted=len(diff.to_delete),
        )

    def _legs(self, diff: LinkDiff) -> Tuple[Tuple[str, Leg, Sequence[Link]], ...]:
        return (
            ("update", self.backend.update_links, diff.to_update),
            ("insert", self.backend.insert_links, diff.to_insert),
            ("delete", self.backend.delete_links, diff.to_delete),
        )

    def _run(self, store: LinkStore, diff: LinkDiff, note_leg: Optional[NoteLeg]) -> None:
        tx = self.backend.begin()
        try:
            if note_leg is not None:
                try:
                    note_leg(tx)
                except Exception as exc:
                    self.logger.warning("note leg failed: %s", exc)
                    tx.rollback()
                    raise LinkSyncError({"note": exc}) from exc
            parent_note_id = store.parent_note_id
            if parent_note_id is None:
                tx.rollback()
                raise LinkInvariantError("Note leg did not bind a parent note id")
            self._run_legs(tx, parent_note_id, diff)
        finally:
            tx.close()

    def _run_legs(self, tx: LinkTransaction, parent_note_id: int, diff: LinkDiff) -> None:
        failures: Dict[str, BaseException] = {}
        first: Optional[BaseException] = None
        for name, leg, links in self._legs(diff):
            if not links:
                continue
            try:
                leg(tx, parent_note_id, links)
            except Exception as exc:
                self.logger.warning("link %s leg failed: %s", name, exc)
                failures[name] = exc
                first = first or exc
        if not failures:
            try:
                tx.commit()
            except Exception as exc:
                self.logger.warning("link commit failed: %s", exc)
                failures["commit"] = exc
                first = exc
        if failures:
            tx.rollback()
            raise LinkSyncError(failures) from first


__all__ = [
    "LinkBackend",
    "LinkTransaction",
    "LinkSyncError",
    "LinkSynchronizer",
    "NoteLeg",
    "SyncReport",
]
