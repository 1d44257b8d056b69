"""Link annotations and their transactional persistence protocol."""

from .models import Link, LinkRow
from .store import LinkDiff, LinkInvariantError, LinkStore
from .sync import (
    LinkBackend,
    LinkSyncError,
    LinkSynchronizer,
    LinkTransaction,
    SyncReport,
)

__all__ = [
    "Link",
    "LinkRow",
    "LinkDiff",
    "LinkInvariantError",
    "LinkStore",
    "LinkBackend",
    "LinkSyncError",
    "LinkSynchronizer",
    "LinkTransaction",
    "SyncReport",
]
