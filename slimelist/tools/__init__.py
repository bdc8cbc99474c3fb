"""MCP tools for SlimeList."""

# Each module exposes register_tools(mcp, session)
from . import catalog
from . import watchlist
from . import meta

__all__ = [
    "catalog",
    "watchlist",
    "meta",
]
