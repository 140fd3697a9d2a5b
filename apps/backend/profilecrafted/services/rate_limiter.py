import logging
import math
import threading
import time
from typing import Callable, Dict, Tuple

from .exceptions import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request counter keyed by client address.

    A key's window starts with its first request and resets once it is older
    than `window_seconds`. The request that would exceed `max_requests` raises
    RateLimitedError carrying the seconds left in the window. Expired windows
    are swept at most once per window length.
    """

    def __init__(
        self,
        max_requests: int = 50,
        window_seconds: int = 900,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, key: str) -> int:
        """Count one request for `key`. Returns the requests left in the window."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0

            if count >= self.max_requests:
                retry_after = max(1, math.ceil(self.window_seconds - (now - started)))
                logger.warning(f"Rate limit exceeded for {key}, retry after {retry_after}s")
                raise RateLimitedError(retry_after=retry_after)

            self._windows[key] = (started, count + 1)
            return self.max_requests - count - 1

    def _sweep(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items()
                   if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Dropped {len(expired)} expired rate limit windows")

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
