"""Type definitions for SlimeList."""

from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from typing import TypedDict, Optional, List, Dict, Any

from ..errors import InvariantViolation

WATCHING = "watching"
COMPLETED = "completed"
PLAN_TO_WATCH = "plan_to_watch"
DROPPED = "dropped"
STATUSES = (WATCHING, COMPLETED, PLAN_TO_WATCH, DROPPED)

MIN_SCORE = 1
MAX_SCORE = 10


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class AiredRange(TypedDict):
    start: Optional[str]
    end: Optional[str]
    label: Optional[str]


class CatalogEntry(TypedDict):
    id: int
    title: str
    titleEnglish: Optional[str]
    titleJapanese: Optional[str]
    episodeCount: int              # 0 = unknown / ongoing
    score: float                   # 0-10, 0 = unrated
    images: Dict[str, Any]
    genres: List[str]
    studios: List[str]
    airedRange: AiredRange
    synopsis: str
    type: Optional[str]            # TV/MOVIE/OVA/ONA/SPECIAL...
    status: Optional[str]
    year: Optional[int]
    url: Optional[str]


class EntryStub(TypedDict):
    id: int
    title: str
    images: Dict[str, Any]


class Page(TypedDict):
    results: List[CatalogEntry]
    lastPage: int


@dataclass
class ListEntry:
    """One title on a user's list. (user_id, anime_id) is the identity."""
    user_id: str
    anime_id: int
    title: str
    image_url: str
    status: str
    episodes_watched: int = 0
    total_episodes: int = 0        # 0 = unknown
    score: Optional[int] = None    # 1-10
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    @property
    def key(self):
        return (self.user_id, self.anime_id)

    def validate(self) -> "ListEntry":
        """Raise InvariantViolation if any field rule is broken."""
        if self.status not in STATUSES:
            raise InvariantViolation(f"unknown status {self.status!r}")
        if self.episodes_watched < 0:
            raise InvariantViolation("episodes_watched must be >= 0")
        if self.total_episodes < 0:
            raise InvariantViolation("total_episodes must be >= 0")
        if self.total_episodes > 0 and self.episodes_watched > self.total_episodes:
            raise InvariantViolation(
                f"episodes_watched {self.episodes_watched} exceeds total_episodes {self.total_episodes}")
        if self.score is not None and not MIN_SCORE <= self.score <= MAX_SCORE:
            raise InvariantViolation(f"score must be {MIN_SCORE}-{MAX_SCORE}")
        return self

    def copy(self, **changes) -> "ListEntry":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
