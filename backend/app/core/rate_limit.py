"""In-memory sliding-window rate limiter for AJAX actions."""
import logging
import threading
import time
from collections import deque
from typing import Callable, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import RateLimitExceeded

logger = logging.getLogger(__name__)

DEFAULT_LIMIT_CLASS = "ajax_general"


class RateLimitEntry:
    """Timestamps of recent calls for one (user, action) key."""

    def __init__(self, limit: int, window_seconds: int):
        self.timestamps: deque = deque()
        self.limit = limit
        self.window_seconds = window_seconds

    def cleanup_expired(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self.timestamps and self.timestamps[0] <= cutoff:
            self.timestamps.popleft()

    def hit(self, now: float) -> Tuple[bool, Optional[float]]:
        """Record a call if allowed.

        Returns (allowed, retry_after). retry_after is None when allowed,
        otherwise the seconds until the oldest call leaves the window.
        """
        self.cleanup_expired(now)
        if len(self.timestamps) < self.limit:
            self.timestamps.append(now)
            return True, None
        retry_after = max(0.0, self.timestamps[0] + self.window_seconds - now)
        return False, retry_after


class RateLimiter:
    """Per-user, per-action limiter. Limits are looked up by action class."""

    def __init__(
        self,
        limits: Optional[dict[str, tuple[int, int]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limits = dict(limits if limits is not None else settings.RATE_LIMITS)
        self._clock = clock
        self._entries: dict[tuple[str, str], RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _limits_for(self, limit_class: str) -> tuple[int, int]:
        return self.limits.get(limit_class) or self.limits[DEFAULT_LIMIT_CLASS]

    def check(self, identifier: str, action: str, limit_class: str = DEFAULT_LIMIT_CLASS) -> None:
        """Count one call. Raises RateLimitExceeded when over the limit."""
        limit, window = self._limits_for(limit_class)
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self._sweep_interval():
                self._sweep(now)
            entry = self._entries.get((identifier, action))
            if entry is None:
                entry = RateLimitEntry(limit, window)
                self._entries[(identifier, action)] = entry
            allowed, retry_after = entry.hit(now)
        if not allowed:
            logger.warning(
                "Rate limit exceeded: action=%s identifier=%s limit=%s/%ss",
                action, identifier, limit, window,
            )
            raise RateLimitExceeded(
                "Too many requests. Please wait a moment and try again.",
                retry_after=retry_after,
            )

    def _sweep_interval(self) -> int:
        return max(window for _, window in self.limits.values())

    def _sweep(self, now: float) -> None:
        """Drop keys with no calls left inside their window. Caller holds the lock."""
        idle = []
        for key, entry in self._entries.items():
            entry.cleanup_expired(now)
            if not entry.timestamps:
                idle.append(key)
        for key in idle:
            del self._entries[key]
        self._last_sweep = now
        if idle:
            logger.debug("Dropped %d idle rate limit entries", len(idle))

    def cleanup_expired_entries(self) -> None:
        with self._lock:
            self._sweep(self._clock())

    @property
    def tracked_keys(self) -> int:
        return len(self._entries)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


rate_limiter = RateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Dependency hook so tests can swap in a limiter with a fake clock."""
    return rate_limiter
