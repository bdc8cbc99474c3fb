"""Jikan catalog client for SlimeList."""

import logging
from typing import Dict, Any, List, Optional

import requests

from .http_client import (
    API_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_POLICY,
    RetryPolicy, RequestGate, fetch_resource,
)
from .normalizers import norm_entry_from_jikan, norm_recommendations
from ..models.types import CatalogEntry, EntryStub, Page

logger = logging.getLogger(__name__)


class CatalogClient:
    """Read-only access to the upstream anime catalog.

    Every method is a pure read, so 429 rejections are retried by
    `fetch_resource`. RemoteError and TransportError reach the caller
    unchanged. Nothing is cached between calls.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        gate: Optional[RequestGate] = None,
        policy: RetryPolicy = DEFAULT_POLICY,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.session = session
        self.gate = gate
        self.policy = policy
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_resource(self, path: str, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return fetch_resource(
            path, query,
            base_url=self.base_url,
            session=self.session,
            policy=self.policy,
            gate=self.gate,
            timeout=self.timeout,
        )

    def _listing(self, path: str, page: int, limit: int) -> List[CatalogEntry]:
        data = self.fetch_resource(path, {"page": page, "limit": limit})
        return [norm_entry_from_jikan(d) for d in data.get("data", [])]

    def list_popular(self, page: int = 1, limit: int = 12) -> List[CatalogEntry]:
        """Top-ranked titles, in upstream order."""
        return self._listing("/top/anime", page, limit)

    def list_seasonal(self, page: int = 1, limit: int = 12) -> List[CatalogEntry]:
        """Titles airing this season, in upstream order."""
        return self._listing("/seasons/now", page, limit)

    def search(self, query: str, page: int = 1, limit: int = 20) -> Page:
        if not (query or "").strip():
            return {"results": [], "lastPage": 0}
        data = self.fetch_resource("/anime", {"q": query, "page": page, "limit": limit})
        pagination = data.get("pagination") or {}
        return {
            "results": [norm_entry_from_jikan(d) for d in data.get("data", [])],
            "lastPage": pagination.get("last_visible_page") or 0,
        }

    def get_by_id(self, anime_id: int) -> CatalogEntry:
        data = self.fetch_resource(f"/anime/{int(anime_id)}/full")
        return norm_entry_from_jikan(data.get("data") or {})

    def get_recommendations(self, anime_id: int) -> List[EntryStub]:
        data = self.fetch_resource(f"/anime/{int(anime_id)}/recommendations")
        return norm_recommendations(data.get("data", []))

    def get_random(self) -> CatalogEntry:
        data = self.fetch_resource("/random/anime")
        return norm_entry_from_jikan(data.get("data") or {})

    def close(self) -> None:
        if self.session is not None:
            self.session.close()
            logger.debug("Closed catalog HTTP session")
