"""
In-memory fixed-window rate limiting.

Counters live in process memory and reset on restart, which is enough for a
single-instance deployment.
"""

import time
from typing import Callable, Dict

from starlette.requests import Request


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each key."""

    def __init__(self, max_requests: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Dict[str, float]] = {}

    def check(self, key: str) -> bool:
        """
        Count a request against ``key``.

        Returns:
            True if the request is allowed, False if the window is exhausted
        """
        now = self.clock()
        window = self._windows.get(key)

        if window is None or now > window["reset_time"]:
            self._windows[key] = {"count": 1, "reset_time": now + self.window_seconds}
            return True

        if window["count"] >= self.max_requests:
            return False

        window["count"] += 1
        return True

    def reset(self) -> None:
        self._windows.clear()


def client_key(request: Request) -> str:
    """Caller identity plus path, e.g. ``203.0.113.7:/api/analyze``."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    elif request.client:
        ip = request.client.host
    else:
        ip = "unknown"
    return f"{ip}:{request.url.path}"
