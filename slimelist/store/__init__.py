"""List store adapters for SlimeList."""

from .base import ListStore
from .memory import InMemoryListStore
from .sqlite import SqliteListStore

__all__ = ["ListStore", "InMemoryListStore", "SqliteListStore"]
