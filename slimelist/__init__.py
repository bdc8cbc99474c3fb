"""SlimeList package.

Exports the FastMCP app factory `create_app`; the catalog client and the
watch-list state machine live in `slimelist.core`.
"""
from .server import create_app

__all__ = ["create_app"]
