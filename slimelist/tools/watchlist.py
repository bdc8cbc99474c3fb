"""Personal watch-list tools for SlimeList."""

from typing import Optional

from ..core.http_client import SCHEMA, err_from_exception
from ..errors import SlimeListError


def _entry(e):
    return {"schemaVersion": SCHEMA, "entry": e.to_dict() if e else None}


def register_tools(mcp, session):
    """Register list tools bound to `session.watchlist` (and `session.catalog` for adds)."""

    @mcp.tool()
    def my_list(status: Optional[str] = None):
        """Entries on the list, optionally only one status
        (watching, completed, plan_to_watch, dropped)."""
        try:
            rows = session.watchlist.entries(status)
            return {"schemaVersion": SCHEMA, "status": status, "results": [r.to_dict() for r in rows]}
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def add_to_list(anime_id: int, status: str = "plan_to_watch",
                    episodes_watched: int = 0, score: Optional[int] = None):
        """Add (or overwrite) a title on the list. Title, cover and episode
        total are copied from the catalog."""
        try:
            entry = session.catalog.get_by_id(anime_id)
            return _entry(session.watchlist.add(entry, status, episodes_watched, score))
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def set_list_status(anime_id: int, status: str):
        try:
            return _entry(session.watchlist.set_status(anime_id, status))
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def increment_episodes(anime_id: int, delta: int = 1, status: Optional[str] = None):
        """Move progress by `delta` episodes. Reaching the last episode marks the title completed."""
        try:
            return _entry(session.watchlist.increment_episodes(anime_id, delta, status))
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def update_list_entry(anime_id: int, status: str, episodes_watched: int, score: Optional[int] = None):
        """Set status, progress and score in one write."""
        try:
            return _entry(session.watchlist.update(anime_id, status, episodes_watched, score))
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def remove_from_list(anime_id: int):
        try:
            session.watchlist.remove(anime_id)
            return {"schemaVersion": SCHEMA, "removed": anime_id}
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def list_status(anime_id: int):
        """Status of a title on the list, null if it is not there."""
        try:
            return {"schemaVersion": SCHEMA, "id": anime_id, "status": session.watchlist.get_status(anime_id)}
        except SlimeListError as e:
            return err_from_exception("store", e)

    @mcp.tool()
    def list_stats():
        """Totals per status, episodes watched and mean score."""
        try:
            return {"schemaVersion": SCHEMA, **session.watchlist.stats()}
        except SlimeListError as e:
            return err_from_exception("store", e)
