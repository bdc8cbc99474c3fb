"""Exception types raised by the SlimeList core."""

from typing import Optional


class SlimeListError(Exception):
    """Base class for every error the core raises."""


class TransportError(SlimeListError):
    """No response was obtained from the upstream (DNS, connect, timeout...)."""


class RemoteError(SlimeListError):
    """The catalog service answered with a non-2xx, non-rate-limit status."""

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f"API error: {status}")


class RateLimited(SlimeListError):
    """Rate limit still in force after a bounded retry policy ran out."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"rate limited after {attempts} attempts")


class StoreError(SlimeListError):
    """The persistence backend rejected or failed a CRUD call."""


class InvariantViolation(SlimeListError):
    """A list entry breaks the status/episode rules."""


class InvalidTransition(InvariantViolation):
    """An action cannot be applied to the current list state."""
