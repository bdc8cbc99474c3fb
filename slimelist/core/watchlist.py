"""Watch-list state machine.

`next_state` is the whole transition table as a pure function: it takes the
current row (None when the title is not on the list) and an action, and
returns the row to persist (None meaning "delete"). `WatchList` reads the
current row, runs `next_state` and commits the result with a single store
call.

Auto-completion: when the total is known and an episode update lands exactly
on it, the status becomes "completed" whatever status the action asked for.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Union

from ..errors import InvalidTransition
from ..models.types import (
    CatalogEntry, ListEntry, STATUSES, COMPLETED, MIN_SCORE, MAX_SCORE, now_iso,
)
from ..store.base import ListStore
from .normalizers import cover_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Add:
    user_id: str
    status: str
    entry: CatalogEntry
    episodes_watched: int = 0
    score: Optional[int] = None


@dataclass(frozen=True)
class SetStatus:
    status: str


@dataclass(frozen=True)
class IncrementEpisodes:
    delta: int = 1
    status: Optional[str] = None


@dataclass(frozen=True)
class Update:
    status: str
    episodes_watched: int
    score: Optional[int] = None


@dataclass(frozen=True)
class Remove:
    pass


Action = Union[Add, SetStatus, IncrementEpisodes, Update, Remove]


def clamp_episodes(value: int, total: int) -> int:
    """Clamp to [0, total]; no upper bound while the total is unknown (0)."""
    value = max(0, value)
    if total > 0:
        value = min(value, total)
    return value


def settle_status(status: str, episodes_watched: int, total: int) -> str:
    if total > 0 and episodes_watched == total:
        return COMPLETED
    return status


def _check_status(status: str) -> str:
    if status not in STATUSES:
        raise InvalidTransition(f"unknown status {status!r}")
    return status


def _check_score(score: Optional[int]) -> Optional[int]:
    if score is not None and not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidTransition(f"score must be {MIN_SCORE}-{MAX_SCORE}, got {score}")
    return score


def next_state(current: Optional[ListEntry], action: Action, now: Optional[str] = None) -> Optional[ListEntry]:
    """Compute the row that should be persisted after `action`."""
    now = now or now_iso()

    if isinstance(action, Add):
        total = max(0, action.entry.get("episodeCount") or 0)
        episodes = clamp_episodes(action.episodes_watched, total)
        return ListEntry(
            user_id=action.user_id,
            anime_id=action.entry["id"],
            title=action.entry.get("title") or "",
            image_url=cover_url(action.entry),
            status=settle_status(_check_status(action.status), episodes, total),
            episodes_watched=episodes,
            total_episodes=total,
            score=_check_score(action.score),
            created_at=current.created_at if current else now,
            updated_at=now,
        )

    if current is None:
        raise InvalidTransition(f"{type(action).__name__} needs the title to be on the list")

    if isinstance(action, Remove):
        return None

    if isinstance(action, SetStatus):
        return current.copy(status=_check_status(action.status), updated_at=now)

    if isinstance(action, IncrementEpisodes):
        status = _check_status(action.status or current.status)
        episodes = clamp_episodes(current.episodes_watched + action.delta, current.total_episodes)
        return current.copy(
            status=settle_status(status, episodes, current.total_episodes),
            episodes_watched=episodes,
            updated_at=now,
        )

    if isinstance(action, Update):
        status = _check_status(action.status)
        episodes = clamp_episodes(action.episodes_watched, current.total_episodes)
        return current.copy(
            status=settle_status(status, episodes, current.total_episodes),
            episodes_watched=episodes,
            score=_check_score(action.score),
            updated_at=now,
        )

    raise InvalidTransition(f"unsupported action {action!r}")


class WatchList:
    """One user's list, committed through a ListStore.

    A StoreError leaves the previously confirmed row as the caller's last
    known state; nothing is reconciled here.
    """

    def __init__(self, store: ListStore, user_id: str):
        if not user_id:
            raise ValueError("user_id required")
        self.store = store
        self.user_id = user_id

    def apply(self, anime_id: int, action: Action) -> Optional[ListEntry]:
        current = self.store.get(self.user_id, anime_id)
        nxt = next_state(current, action)

        if nxt is None:
            self.store.remove(self.user_id, anime_id)
            logger.info("Removed anime=%s from list of user=%s", anime_id, self.user_id)
            return None

        if isinstance(action, Add):
            saved = self.store.upsert(nxt)
        else:
            saved = self.store.update_progress(self.user_id, anime_id, nxt.status,
                                               nxt.episodes_watched, nxt.score,
                                               updated_at=nxt.updated_at)
        logger.info("List entry user=%s anime=%s -> status=%s eps=%s/%s",
                    self.user_id, anime_id, saved.status, saved.episodes_watched, saved.total_episodes)
        return saved

    # ---- Mutations ----
    def add(self, entry: CatalogEntry, status: str, episodes_watched: int = 0,
            score: Optional[int] = None) -> ListEntry:
        return self.apply(entry["id"], Add(self.user_id, status, entry, episodes_watched, score))

    def set_status(self, anime_id: int, status: str) -> ListEntry:
        return self.apply(anime_id, SetStatus(status))

    def increment_episodes(self, anime_id: int, delta: int = 1, status: Optional[str] = None) -> ListEntry:
        return self.apply(anime_id, IncrementEpisodes(delta, status))

    def update(self, anime_id: int, status: str, episodes_watched: int,
               score: Optional[int] = None) -> ListEntry:
        return self.apply(anime_id, Update(status, episodes_watched, score))

    def remove(self, anime_id: int) -> None:
        self.apply(anime_id, Remove())

    # ---- Reads ----
    def entries(self, status: Optional[str] = None) -> List[ListEntry]:
        if status is None:
            return self.store.list_all(self.user_id)
        return self.store.list_by_status(self.user_id, _check_status(status))

    def get(self, anime_id: int) -> Optional[ListEntry]:
        return self.store.get(self.user_id, anime_id)

    def get_status(self, anime_id: int) -> Optional[str]:
        """Status of a title on this list, or None when it is not on it."""
        row = self.get(anime_id)
        return row.status if row else None

    def stats(self) -> Dict[str, Any]:
        rows = self.entries()
        scored = [r.score for r in rows if r.score is not None]
        return {
            "totalAnime": len(rows),
            "totalEpisodes": sum(r.episodes_watched for r in rows),
            "byStatus": {s: sum(1 for r in rows if r.status == s) for s in STATUSES},
            "avgScore": sum(scored) / len(scored) if scored else 0.0,
        }
