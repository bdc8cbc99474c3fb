"""In-process list store, used by tests and ephemeral sessions."""

import threading
from typing import Dict, List, Optional, Tuple

from ..errors import StoreError
from ..models.types import ListEntry, now_iso
from .base import ListStore


class InMemoryListStore(ListStore):
    def __init__(self):
        self._rows: Dict[Tuple[str, int], ListEntry] = {}
        self._lock = threading.Lock()

    def _sorted(self, rows) -> List[ListEntry]:
        return sorted((r.copy() for r in rows), key=lambda r: r.updated_at, reverse=True)

    def list_all(self, user_id: str) -> List[ListEntry]:
        with self._lock:
            return self._sorted(r for r in self._rows.values() if r.user_id == user_id)

    def list_by_status(self, user_id: str, status: str) -> List[ListEntry]:
        with self._lock:
            return self._sorted(r for r in self._rows.values()
                                if r.user_id == user_id and r.status == status)

    def get(self, user_id: str, anime_id: int) -> Optional[ListEntry]:
        with self._lock:
            row = self._rows.get((user_id, anime_id))
            return row.copy() if row else None

    def upsert(self, entry: ListEntry) -> ListEntry:
        entry.validate()
        with self._lock:
            existing = self._rows.get(entry.key)
            stored = entry.copy(created_at=existing.created_at if existing else entry.created_at)
            self._rows[entry.key] = stored
            return stored.copy()

    def update_progress(self, user_id: str, anime_id: int, status: str,
                        episodes_watched: int, score: Optional[int] = None,
                        updated_at: Optional[str] = None) -> ListEntry:
        with self._lock:
            row = self._rows.get((user_id, anime_id))
            if row is None:
                raise StoreError(f"no list entry for user={user_id} anime={anime_id}")
            updated = row.copy(status=status, episodes_watched=episodes_watched,
                               score=score, updated_at=updated_at or now_iso()).validate()
            self._rows[updated.key] = updated
            return updated.copy()

    def remove(self, user_id: str, anime_id: int) -> None:
        with self._lock:
            self._rows.pop((user_id, anime_id), None)
