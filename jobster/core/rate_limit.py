"""
Rate Limiting Module.

Sliding-window limiter used to throttle register/login per client address.
Each key keeps a deque of request timestamps; entries older than the window
are dropped before every check.

Usage:
    limiter = SlidingWindowRateLimiter(max_requests=10, window_seconds=900)

    @router.post("/login", dependencies=[Depends(auth_rate_limit)])
    def login(...): ...
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request

from jobster.core.errors import TooManyRequestsError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from your IP, please try again after 15 minutes"


class SlidingWindowRateLimiter:
    """Thread-safe per-key sliding window counter."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _clean_window(self, window: Deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

    def _sweep(self, now: float) -> None:
        """Drop keys whose windows have fully expired. Caller holds the lock."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._windows):
            window = self._windows[key]
            self._clean_window(window, now)
            if not window:
                del self._windows[key]

    def hit(self, key: str) -> bool:
        """
        Record a request for key.

        Returns:
            True if the request is allowed, False if the key is over its limit
        """
        with self._lock:
            now = self._clock()
            self._sweep(now)
            window = self._windows.setdefault(key, deque())
            self._clean_window(window, now)
            if len(window) >= self.max_requests:
                return False
            window.append(now)
            return True

    def remaining(self, key: str) -> int:
        with self._lock:
            window = self._windows.get(key)
            if not window:
                return self.max_requests
            self._clean_window(window, self._clock())
            if not window:
                del self._windows[key]
                return self.max_requests
            return max(0, self.max_requests - len(window))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def auth_rate_limit(request: Request):
    """Dependency - throttle auth endpoints with the app's limiter."""
    limiter: SlidingWindowRateLimiter = request.app.state.auth_limiter
    key = client_key(request)
    if not limiter.hit(key):
        logger.warning("Auth rate limit exceeded for %s on %s", key, request.url.path)
        raise TooManyRequestsError(RATE_LIMIT_MESSAGE)
