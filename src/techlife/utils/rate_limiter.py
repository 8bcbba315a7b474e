"""Per-client sliding window rate limiting for form submissions."""

import threading
import time
from collections import OrderedDict, deque
from collections.abc import Callable


def _now_ms() -> int:
    return int(time.time() * 1000)


class SlidingWindowRateLimiter:
    """Counts recent events per client key over a sliding time window.

    A client may record at most ``max_events`` events within any
    ``window_ms`` span. Stale timestamps are dropped whenever a client is
    read, and the number of tracked clients is bounded: when a new client
    would exceed ``max_clients``, fully stale clients are swept first and
    the least recently seen client is evicted if that is not enough.

    Example:
        >>> limiter = SlidingWindowRateLimiter(max_events=3, window_ms=60_000)
        >>> limiter.hit("203.0.113.7")
        True
    """

    def __init__(
        self,
        max_events: int,
        window_ms: int,
        max_clients: int = 10_000,
        clock: Callable[[], int] = _now_ms,
    ):
        """Initialize rate limiter.

        Args:
            max_events: Events allowed per client within the window
            window_ms: Window length in milliseconds
            max_clients: Upper bound on tracked clients
            clock: Millisecond clock, injectable for tests
        """
        self.max_events = max_events
        self.window_ms = window_ms
        self.max_clients = max_clients
        self.clock = clock
        self._events: OrderedDict[str, deque[int]] = OrderedDict()
        self.lock = threading.Lock()

    def _prune(self, stamps: deque[int], now: int) -> None:
        while stamps and now - stamps[0] >= self.window_ms:
            stamps.popleft()

    def _make_room(self, now: int) -> None:
        if len(self._events) < self.max_clients:
            return
        self._sweep(now)
        while len(self._events) >= self.max_clients:
            self._events.popitem(last=False)

    def _sweep(self, now: int) -> int:
        removed = 0
        for key in list(self._events):
            stamps = self._events[key]
            self._prune(stamps, now)
            if not stamps:
                del self._events[key]
                removed += 1
        return removed

    def count(self, key: str) -> int:
        """Return the number of events for ``key`` inside the current window."""
        with self.lock:
            stamps = self._events.get(key)
            if stamps is None:
                return 0
            self._prune(stamps, self.clock())
            if not stamps:
                del self._events[key]
                return 0
            return len(stamps)

    def hit(self, key: str) -> bool:
        """Record an event for ``key`` if the window allows it.

        Returns:
            True if the event was recorded, False if the limit is reached
        """
        with self.lock:
            now = self.clock()
            stamps = self._events.get(key)
            if stamps is None:
                self._make_room(now)
                stamps = deque()
                self._events[key] = stamps
            else:
                self._prune(stamps, now)
                self._events.move_to_end(key)

            if len(stamps) >= self.max_events:
                return False

            stamps.append(now)
            return True

    def sweep(self) -> int:
        """Drop every client whose window is entirely stale.

        Returns:
            Number of clients removed
        """
        with self.lock:
            return self._sweep(self.clock())

    def reset(self) -> None:
        """Forget all clients."""
        with self.lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
