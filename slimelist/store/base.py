"""Contract for persisting a user's list entries."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.types import ListEntry


class ListStore(ABC):
    """CRUD over ListEntry rows keyed by (user_id, anime_id).

    Implementations raise StoreError for every backend failure and never
    retry; retry policy belongs to the caller.
    """

    @abstractmethod
    def list_all(self, user_id: str) -> List[ListEntry]:
        """All entries of a user, most recently updated first."""

    @abstractmethod
    def list_by_status(self, user_id: str, status: str) -> List[ListEntry]:
        ...

    @abstractmethod
    def get(self, user_id: str, anime_id: int) -> Optional[ListEntry]:
        ...

    @abstractmethod
    def upsert(self, entry: ListEntry) -> ListEntry:
        """Insert or replace the row for entry.key; created_at survives a replace."""

    @abstractmethod
    def update_progress(self, user_id: str, anime_id: int, status: str,
                        episodes_watched: int, score: Optional[int] = None,
                        updated_at: Optional[str] = None) -> ListEntry:
        """Overwrite status, episodes and score of an existing row in one write.

        updated_at defaults to the current time.
        """

    @abstractmethod
    def remove(self, user_id: str, anime_id: int) -> None:
        ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
