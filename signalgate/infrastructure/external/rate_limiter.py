"""
Rolling-window rate limiter.

One deque of request timestamps per key (credential pair). The
eviction, the count and the append happen under a single
``threading.Lock``; the check is synchronous, so the limiter can be
shared by coroutines and threads alike.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from signalgate.shared.logging.logger import get_logger

logger = get_logger("rate_limiter")


class RateLimiter:
    """
    ``max_requests`` per rolling ``window_seconds`` for every key.

    USAGE:
        limiter = RateLimiter(600, 60.0)
        if not limiter.check_and_record(api_key):
            ...  # throttled, do not call the exchange
    """

    def __init__(
        self,
        max_requests: int = 600,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_requests = max_requests
        self._window = window_seconds
        self._clock = clock
        self._calls: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def check_and_record(self, key: str) -> bool:
        """True (and the call is counted) when ``key`` is under its limit."""
        now = self._clock()
        with self._lock:
            calls = self._calls.setdefault(key, deque())
            while calls and now - calls[0] >= self._window:
                calls.popleft()
            if len(calls) >= self._max_requests:
                logger.warning(
                    "Rate limit reached for key %s… (%d in %.0fs)",
                    key[:6], len(calls), self._window,
                )
                return False
            calls.append(now)
            return True

    def remaining(self, key: str) -> int:
        now = self._clock()
        with self._lock:
            calls = self._calls.get(key, ())
            recent = sum(1 for t in calls if now - t < self._window)
        return max(0, self._max_requests - recent)
