import math
import threading

from mockapi.utils.clock import SystemClock


class RateLimiter:
    """
    Fixed-window request counter.

    The window restarts on the first check made more than `window_seconds`
    after it opened, so a burst straddling a boundary can exceed
    `max_requests` across the two windows.
    """

    def __init__(self, max_requests: int = 10, window_seconds: int = 60, clock=None):
        self.clock = clock or SystemClock()
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.count = 0
        self.window_start = self.clock.now()
        self._lock = threading.Lock()

    def check(self) -> bool:
        with self._lock:
            now = self.clock.now()
            if now - self.window_start > self.window_seconds:
                self.count = 0
                self.window_start = now
            self.count += 1
            return self.count <= self.max_requests

    def retry_after(self) -> int:
        """Whole seconds until the current window closes, never below 1."""
        elapsed = self.clock.now() - self.window_start
        return max(1, math.ceil(self.window_seconds - elapsed))

    def remaining(self) -> int:
        return max(0, self.max_requests - self.count)
