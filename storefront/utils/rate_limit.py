# storefront/utils/rate_limit.py
import time
from typing import Callable, Dict, List
from ..config import Config

class RateLimiter:
    """Sliding-window request counter keyed by user id or client IP"""

    def __init__(self, max_requests: int = Config.RATE_LIMIT_MAX_REQUESTS,
                 window_seconds: int = Config.RATE_LIMIT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, List[float]] = {}
        self._last_sweep = clock()

    def check(self, key: str) -> bool:
        """
        Record a request for ``key``.

        Returns:
            True if within limit, False if exceeded
        """
        now = self._clock()
        window_start = now - self.window_seconds

        if now - self._last_sweep >= self.window_seconds:
            self._sweep(window_start)
            self._last_sweep = now

        # Drop requests that fell out of the window
        recent = [t for t in self._requests.get(key, []) if t > window_start]

        if len(recent) >= self.max_requests:
            self._requests[key] = recent
            return False

        recent.append(now)
        self._requests[key] = recent
        return True

    def _sweep(self, window_start: float):
        """Forget keys with no request left in the window"""
        stale = [key for key, times in self._requests.items() if not times or times[-1] <= window_start]
        for key in stale:
            del self._requests[key]

    def __len__(self) -> int:
        return len(self._requests)
