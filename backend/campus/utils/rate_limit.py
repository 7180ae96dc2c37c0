"""In-memory rate limiter used to throttle login attempts."""

from __future__ import annotations

import threading
import time
from collections import defaultdict, deque


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by an arbitrary string (client host)."""

    def __init__(self, clock=time.monotonic):
        self._hits: dict[str, deque] = defaultdict(deque)
        self._lock = threading.Lock()
        self._clock = clock

    def allow(self, key: str, max_requests: int, window_seconds: int) -> tuple[bool, int]:
        """Record a hit for `key`; return `(allowed, retry_after_seconds)`."""
        now = self._clock()
        with self._lock:
            cutoff = now - window_seconds
            self._evict_idle(cutoff)
            hits = self._hits[key]
            while hits and hits[0] < cutoff:
                hits.popleft()
            if len(hits) >= max_requests:
                return False, max(1, int(window_seconds - (now - hits[0])))
            hits.append(now)
        return True, 0

    def _evict_idle(self, cutoff: float) -> None:
        # drop keys whose newest hit left the window; callers hold the lock
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] < cutoff]:
            del self._hits[key]

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def clear(self) -> None:
        with self._lock:
            self._hits.clear()
