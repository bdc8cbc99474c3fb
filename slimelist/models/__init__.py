"""Models and type definitions for SlimeList."""

from .types import (
    CatalogEntry, EntryStub, Page, AiredRange, ListEntry,
    STATUSES, WATCHING, COMPLETED, PLAN_TO_WATCH, DROPPED,
)

__all__ = [
    "CatalogEntry", "EntryStub", "Page", "AiredRange", "ListEntry",
    "STATUSES", "WATCHING", "COMPLETED", "PLAN_TO_WATCH", "DROPPED",
]
