"""Session scope: the HTTP session, request gate and list store of one user."""

import logging
from typing import Dict, Any, Optional

import requests

from .catalog import CatalogClient
from .http_client import API_BASE_URL, DEFAULT_TIMEOUT, RequestGate, RetryPolicy
from .watchlist import WatchList
from ..store.base import ListStore

logger = logging.getLogger(__name__)


class Session:
    """Owns the collaborators the core needs for one authenticated user.

    Use as a context manager, or call open()/close() explicitly. All
    catalog calls made through `catalog` share one RequestGate.
    """

    def __init__(self, user_id: str, store: ListStore, cfg: Dict[str, Any],
                 http: Optional[requests.Session] = None, owns_store: bool = False):
        self.user_id = user_id
        self.store = store
        self.cfg = cfg
        self.owns_store = owns_store
        self._http = http
        self.catalog: Optional[CatalogClient] = None
        self.watchlist: Optional[WatchList] = None

    @property
    def is_open(self) -> bool:
        return self.catalog is not None

    def open(self) -> "Session":
        if self.is_open:
            return self
        self.catalog = CatalogClient(
            session=self._http or requests.Session(),
            gate=RequestGate(int(self.cfg.get("max_concurrency", 3))),
            policy=RetryPolicy.from_config(self.cfg),
            base_url=self.cfg.get("base_url", API_BASE_URL),
            timeout=float(self.cfg.get("timeout", DEFAULT_TIMEOUT)),
        )
        self.watchlist = WatchList(self.store, self.user_id)
        logger.debug("Opened session for user=%s", self.user_id)
        return self

    def close(self) -> None:
        if not self.is_open:
            return
        self.catalog.close()
        if self.owns_store:
            self.store.close()
        self.catalog = None
        self.watchlist = None
        logger.debug("Closed session for user=%s", self.user_id)

    def __enter__(self) -> "Session":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
