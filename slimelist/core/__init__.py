"""Core functionality for SlimeList."""

from .http_client import fetch_resource, err_payload, RetryPolicy, RequestGate
from .catalog import CatalogClient
from .normalizers import norm_entry_from_jikan, norm_stub_from_jikan, norm_recommendations
from .watchlist import (
    WatchList, next_state, Add, SetStatus, IncrementEpisodes, Update, Remove,
)
from .session import Session

__all__ = [
    "fetch_resource", "err_payload", "RetryPolicy", "RequestGate",
    "CatalogClient",
    "norm_entry_from_jikan", "norm_stub_from_jikan", "norm_recommendations",
    "WatchList", "next_state", "Add", "SetStatus", "IncrementEpisodes", "Update", "Remove",
    "Session",
]
