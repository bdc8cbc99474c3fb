"""HTTP client and rate-aware request dispatching for SlimeList."""

import contextlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Any, Optional

import requests

from ..errors import (
    SlimeListError, TransportError, RemoteError, RateLimited, StoreError, InvariantViolation,
)

logger = logging.getLogger(__name__)

# Constants
API_BASE_URL = "https://api.jikan.moe/v4"
DEFAULT_TIMEOUT = 15
RATE_LIMIT_STATUS = 429
MAX_DELAY = 60.0  # exponential backoff ceiling, seconds
BACKOFF_STRATEGIES = ("fixed", "exponential")
UA = "slimelist/0.1"
SCHEMA = "1.0.0"


@dataclass(frozen=True)
class RetryPolicy:
    """How to wait out rate-limit rejections.

    max_attempts=None retries forever. The default (unlimited, fixed 1s, no
    jitter) assumes the upstream limiter clears within one interval.
    """
    max_attempts: Optional[int] = None
    backoff: str = "fixed"
    base_delay: float = 1.0

    def __post_init__(self):
        if self.backoff not in BACKOFF_STRATEGIES:
            raise ValueError(f"unknown backoff strategy: {self.backoff!r}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1 or None")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "RetryPolicy":
        max_attempts = cfg.get("max_attempts")
        return cls(
            max_attempts=int(max_attempts) if max_attempts is not None else None,
            backoff=cfg.get("backoff", "fixed"),
            base_delay=float(cfg.get("backoff_seconds", 1.0)),
        )

    def allows_retry(self, attempt: int) -> bool:
        """True if another request may follow the given (1-based) attempt."""
        return self.max_attempts is None or attempt < self.max_attempts

    def delay(self, attempt: int) -> float:
        if self.backoff == "exponential":
            return min(self.base_delay * (2 ** min(attempt - 1, 32)), MAX_DELAY)
        return self.base_delay


DEFAULT_POLICY = RetryPolicy()


class RequestGate:
    """Bounded concurrency gate shared by all catalog calls of one session."""

    def __init__(self, max_concurrency: int = 3):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency
        self._sem = threading.BoundedSemaphore(max_concurrency)

    def __enter__(self) -> "RequestGate":
        self._sem.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self._sem.release()


def _send(method: str, url: str, session: Optional[requests.Session] = None, **kw) -> requests.Response:
    """Single request, no retry. Network failures become TransportError."""
    timeout = kw.pop("timeout", DEFAULT_TIMEOUT)
    headers = {"User-Agent": UA, **kw.pop("headers", {})}
    request = session.request if session is not None else requests.request
    try:
        return request(method, url, timeout=timeout, headers=headers, **kw)
    except requests.RequestException as e:
        logger.warning("%s %s failed before any response: %s", method, url, e)
        raise TransportError(str(e)) from e


def fetch_resource(
    path: str,
    query: Optional[Dict[str, Any]] = None,
    *,
    base_url: str = API_BASE_URL,
    session: Optional[requests.Session] = None,
    policy: RetryPolicy = DEFAULT_POLICY,
    gate: Optional[RequestGate] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """GET base_url+path and return the decoded JSON body.

    429 responses are retried according to `policy`; the gate permit is
    released while waiting. Any other non-2xx status raises RemoteError
    at once.
    """
    url = base_url + path
    attempt = 0
    while True:
        attempt += 1
        with gate if gate is not None else contextlib.nullcontext():
            r = _send("GET", url, session, params=query, timeout=timeout)

        if r.status_code == RATE_LIMIT_STATUS:
            if not policy.allows_retry(attempt):
                logger.warning("Rate limit on %s not cleared after %d attempts", path, attempt)
                raise RateLimited(attempt)
            wait = policy.delay(attempt)
            logger.info("Rate limited on %s (attempt %d), retrying in %.2fs", path, attempt, wait)
            time.sleep(wait)
            continue

        if not 200 <= r.status_code < 300:
            logger.warning("GET %s returned %s", path, r.status_code)
            raise RemoteError(r.status_code)

        try:
            return r.json()
        except ValueError as e:
            logger.warning("GET %s returned a non-JSON body", path)
            raise RemoteError(r.status_code, f"invalid JSON body: {e}") from e


def err_payload(source: str, code: str, message: str) -> Dict[str, Any]:
    return {"schemaVersion": SCHEMA, "error": {"code": code, "message": message, "source": source}}


def err_from_exception(source: str, e: SlimeListError) -> Dict[str, Any]:
    if isinstance(e, TransportError):
        code = "TIMEOUT" if isinstance(e.__cause__, requests.Timeout) else "TRANSPORT"
    elif isinstance(e, RemoteError):
        code = f"UPSTREAM_{e.status}"
    elif isinstance(e, RateLimited):
        code = "RATE_LIMITED"
    elif isinstance(e, StoreError):
        code = "STORE"
    elif isinstance(e, InvariantViolation):
        code = "INVALID"
    else:
        code = "UNEXPECTED"
    return err_payload(source, code, str(e))
