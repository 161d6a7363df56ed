"""Bounded time-to-live cache.

Used by the parameter provider, the calculator's optional result cache and
the optimizer's memoization. Keys are arbitrary JSON-serializable values;
they are canonicalised with sorted keys so equal mappings hit the same
entry. When full, the oldest entry is evicted.
"""

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


def make_key(value: Any) -> Hashable:
    """Canonical string key for a JSON-serializable value."""
    return json.dumps(value, sort_keys=True, default=str)


class CalculationCache:
    """Thread-safe TTL cache with a size bound.

    Args:
        max_size: Maximum number of live entries
        ttl_seconds: Entry lifetime (s)
        clock: Monotonic time source, injectable for tests
    """

    def __init__(self, max_size: int = 50, ttl_seconds: float = 300.0,
                 clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: Any) -> Optional[Any]:
        """Cached value, or None when absent or expired."""
        cache_key = make_key(key)
        now = self._clock()
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, now):
                del self._entries[cache_key]
                return None
            return value

    def set(self, key: Any, value: Any) -> None:
        cache_key = make_key(key)
        now = self._clock()
        with self._lock:
            self._entries.pop(cache_key, None)
            if len(self._entries) >= self.max_size:
                self._purge(now)
            if len(self._entries) >= self.max_size:
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[oldest]
                logger.debug(f"Cache full, evicted oldest entry {oldest}")
            self._entries[cache_key] = (now, value)

    def get_or_compute(self, key: Any, compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or compute and store it.

        ``compute`` runs outside the lock; concurrent misses may compute
        the same value twice.
        """
        value = self.get(key)
        if value is not None:
            return value
        value = compute()
        self.set(key, value)
        return value

    def _purge(self, now: float) -> int:
        stale = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            return self._purge(now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
