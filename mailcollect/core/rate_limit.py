"""
In-memory rate limiter for the write endpoints.

Fixed window per source: the first request from a source opens a window
of `window` seconds, at most `max_requests` are allowed inside it, and the
window resets once it has elapsed.
"""

import hashlib
import logging
import threading
import time

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, max_requests=5, window=15 * 60, clock=None):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        self.max_requests = max_requests
        self.window = window
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        # {source_hash: [window_start, count]}
        self._windows = {}

    @staticmethod
    def _key(source_id):
        return hashlib.sha256((source_id or 'unknown').encode()).hexdigest()[:16]

    def allow(self, source_id):
        """Count a request from source_id. Returns False once the window is full."""
        now = self._clock()
        key = self._key(source_id)

        with self._lock:
            self._prune(now)
            window = self._windows.get(key)
            if window is None or now - window[0] >= self.window:
                self._windows[key] = [now, 1]
                return True

            if window[1] >= self.max_requests:
                return False

            window[1] += 1
            return True

    def retry_after(self, source_id):
        """Seconds until source_id's current window resets (0 if not limited)."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(self._key(source_id))
            if window is None:
                return 0
            return max(0, self.window - (now - window[0]))

    def reset(self):
        with self._lock:
            self._windows.clear()

    def _prune(self, now):
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.window]
        for k in expired:
            del self._windows[k]
        if expired:
            logger.debug(f"Rate limiter pruned {len(expired)} expired windows")
