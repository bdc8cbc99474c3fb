"""SQLite-backed list store."""

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import List, Optional

from ..errors import StoreError
from ..models.types import ListEntry, now_iso
from .base import ListStore

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS anime_list (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    anime_id INTEGER NOT NULL,
    title TEXT NOT NULL,
    image_url TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL,
    episodes_watched INTEGER NOT NULL DEFAULT 0,
    total_episodes INTEGER NOT NULL DEFAULT 0,
    score INTEGER,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE (user_id, anime_id)
);
CREATE INDEX IF NOT EXISTS idx_anime_list_user_status ON anime_list (user_id, status);
"""

UPSERT = """
INSERT INTO anime_list (user_id, anime_id, title, image_url, status, episodes_watched,
                        total_episodes, score, created_at, updated_at)
VALUES (:user_id, :anime_id, :title, :image_url, :status, :episodes_watched,
        :total_episodes, :score, :created_at, :updated_at)
ON CONFLICT (user_id, anime_id) DO UPDATE SET
    title = excluded.title,
    image_url = excluded.image_url,
    status = excluded.status,
    episodes_watched = excluded.episodes_watched,
    total_episodes = excluded.total_episodes,
    score = excluded.score,
    updated_at = excluded.updated_at
"""

COLUMNS = ("user_id", "anime_id", "title", "image_url", "status", "episodes_watched",
           "total_episodes", "score", "created_at", "updated_at")


def _row_to_entry(r: sqlite3.Row) -> ListEntry:
    return ListEntry(**{c: r[c] for c in COLUMNS})


class SqliteListStore(ListStore):
    def __init__(self, db_path: str):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with self.conn() as c:
            c.executescript(SCHEMA)
        logger.debug("SqliteListStore ready at %s", db_path)

    @contextmanager
    def conn(self):
        try:
            con = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open {self.db_path}: {e}") from e
        con.row_factory = sqlite3.Row
        try:
            yield con
            con.commit()
        except sqlite3.Error as e:
            # closing without commit discards the write
            raise StoreError(str(e)) from e
        finally:
            con.close()

    def list_all(self, user_id: str) -> List[ListEntry]:
        with self.conn() as c:
            rows = c.execute("SELECT * FROM anime_list WHERE user_id = ? ORDER BY updated_at DESC",
                             (user_id,)).fetchall()
            return [_row_to_entry(r) for r in rows]

    def list_by_status(self, user_id: str, status: str) -> List[ListEntry]:
        with self.conn() as c:
            rows = c.execute("SELECT * FROM anime_list WHERE user_id = ? AND status = ? "
                             "ORDER BY updated_at DESC", (user_id, status)).fetchall()
            return [_row_to_entry(r) for r in rows]

    def _get(self, c, user_id: str, anime_id: int) -> Optional[ListEntry]:
        r = c.execute("SELECT * FROM anime_list WHERE user_id = ? AND anime_id = ?",
                      (user_id, anime_id)).fetchone()
        return _row_to_entry(r) if r else None

    def get(self, user_id: str, anime_id: int) -> Optional[ListEntry]:
        with self.conn() as c:
            return self._get(c, user_id, anime_id)

    def upsert(self, entry: ListEntry) -> ListEntry:
        entry.validate()
        with self.conn() as c:
            c.execute(UPSERT, entry.to_dict())
            return self._get(c, entry.user_id, entry.anime_id)

    def update_progress(self, user_id: str, anime_id: int, status: str,
                        episodes_watched: int, score: Optional[int] = None,
                        updated_at: Optional[str] = None) -> ListEntry:
        with self.conn() as c:
            row = self._get(c, user_id, anime_id)
            if row is None:
                raise StoreError(f"no list entry for user={user_id} anime={anime_id}")
            updated = row.copy(status=status, episodes_watched=episodes_watched,
                               score=score, updated_at=updated_at or now_iso()).validate()
            c.execute("UPDATE anime_list SET status = ?, episodes_watched = ?, score = ?, updated_at = ? "
                      "WHERE user_id = ? AND anime_id = ?",
                      (updated.status, updated.episodes_watched, updated.score, updated.updated_at,
                       user_id, anime_id))
            return updated

    def remove(self, user_id: str, anime_id: int) -> None:
        with self.conn() as c:
            c.execute("DELETE FROM anime_list WHERE user_id = ? AND anime_id = ?", (user_id, anime_id))
