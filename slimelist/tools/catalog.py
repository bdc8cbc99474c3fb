"""Catalog browsing tools for SlimeList."""

from typing import Optional

from ..core.http_client import SCHEMA, err_from_exception
from ..errors import SlimeListError

MAX_LIMIT = 25  # Jikan page size cap


def _limit(limit: int) -> int:
    return min(max(limit, 1), MAX_LIMIT)


def register_tools(mcp, session):
    """Register catalog tools bound to `session.catalog`."""

    @mcp.tool()
    def top_anime(page: int = 1, limit: int = 12):
        """Most popular anime (MyAnimeList ranking)."""
        try:
            page = max(page, 1)
            results = session.catalog.list_popular(page, _limit(limit))
            return {"schemaVersion": SCHEMA, "page": page, "results": results}
        except SlimeListError as e:
            return err_from_exception("jikan", e)

    @mcp.tool()
    def season_now(page: int = 1, limit: int = 12):
        """Anime airing in the current season."""
        try:
            page = max(page, 1)
            results = session.catalog.list_seasonal(page, _limit(limit))
            return {"schemaVersion": SCHEMA, "page": page, "results": results}
        except SlimeListError as e:
            return err_from_exception("jikan", e)

    @mcp.tool()
    def search_anime(query: str, page: int = 1, limit: int = 20):
        """Search anime by title. An empty query returns no results."""
        try:
            page = max(page, 1)
            found = session.catalog.search(query, page, _limit(limit))
            return {"schemaVersion": SCHEMA, "query": query, "page": page, **found}
        except SlimeListError as e:
            return err_from_exception("jikan", e)

    @mcp.tool()
    def anime_details(anime_id: int):
        """Full record of one anime by MyAnimeList id."""
        try:
            return {"schemaVersion": SCHEMA, **session.catalog.get_by_id(anime_id)}
        except SlimeListError as e:
            return err_from_exception("jikan", e)

    @mcp.tool()
    def anime_recommendations(anime_id: int, limit: Optional[int] = None):
        """Titles recommended by users who liked `anime_id`."""
        try:
            recs = session.catalog.get_recommendations(anime_id)
            if limit is not None:
                recs = recs[:max(limit, 0)]
            return {"schemaVersion": SCHEMA, "id": anime_id, "results": recs}
        except SlimeListError as e:
            return err_from_exception("jikan", e)

    @mcp.tool()
    def random_anime():
        """One random anime."""
        try:
            return {"schemaVersion": SCHEMA, **session.catalog.get_random()}
        except SlimeListError as e:
            return err_from_exception("jikan", e)
