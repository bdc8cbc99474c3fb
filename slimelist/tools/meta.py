"""Metadata and help tools for SlimeList."""

from importlib.metadata import version, PackageNotFoundError

from ..core.http_client import SCHEMA
from ..models.types import STATUSES

# Version info
try:
    __VERSION__ = version("slimelist")   # distribution name in pyproject
except PackageNotFoundError:
    __VERSION__ = "0.0.0+dev"


def health():
    """Health check endpoint."""
    return {"schemaVersion": SCHEMA, "ok": True, "sources": ["jikan"]}


def help_text():
    """Plain-text summary of the available tools."""
    return (
        "slimelist · what I can do:\n"
        "- top_anime(page, limit) / season_now(page, limit): browse the catalog.\n"
        "- search_anime(query, page, limit): search by title.\n"
        "- anime_details(anime_id) / anime_recommendations(anime_id) / random_anime().\n"
        "- my_list(status): your list, optionally filtered by status.\n"
        "- add_to_list(anime_id, status): add or overwrite a title.\n"
        "- increment_episodes(anime_id, delta): track progress; the last episode completes the title.\n"
        "- set_list_status / update_list_entry / remove_from_list / list_status / list_stats.\n"
    )


def about(session):
    cfg = session.cfg
    return {
        "schemaVersion": SCHEMA,
        "name": "slimelist",
        "version": __VERSION__,
        "user": session.user_id,
        "endpoints": {"jikan": cfg.get("base_url")},
        "statuses": list(STATUSES),
        "limits": {
            "maxPerPage": 25,
            "timeoutSec": cfg.get("timeout"),
            "maxConcurrency": cfg.get("max_concurrency"),
            "rateLimitRetry": {
                "maxAttempts": cfg.get("max_attempts"),
                "backoff": cfg.get("backoff"),
                "seconds": cfg.get("backoff_seconds"),
            },
        },
    }


def register_tools(mcp, session):
    """Register meta/help tools with FastMCP."""
    mcp.tool()(health)
    mcp.tool()(help_text)

    @mcp.tool(name="about")
    def _about():
        """About information for the service."""
        return about(session)
