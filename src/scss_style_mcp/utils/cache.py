"""In-memory cache for lint results."""

import time
import threading
from collections import OrderedDict
from hashlib import sha256
from typing import Any, Dict, Generic, NamedTuple, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class _Entry(NamedTuple):
    value: Any
    stored_at: float


class LRUCache(Generic[K, V]):
    """Thread-safe least-recently-used cache with optional expiry."""

    def __init__(self, max_size: int = 128, ttl: Optional[float] = None):
        """
        Args:
            max_size: Number of entries kept before the oldest is dropped
            ttl: Seconds an entry stays valid (None keeps entries until evicted)
        """
        self.max_size = max_size
        self.ttl = ttl
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[K, _Entry]" = OrderedDict()
        self._lock = threading.RLock()

    def _expired(self, entry: _Entry, now: float) -> bool:
        return bool(self.ttl) and now - entry.stored_at > self.ttl

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._expired(entry, time.time()):
                self._entries.pop(key, None)
                self.misses += 1
                return default

            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = _Entry(value, time.time())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def delete(self, key: K) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def cleanup_expired(self) -> int:
        """Drop expired entries; return how many were removed."""
        if not self.ttl:
            return 0

        with self._lock:
            now = time.time()
            stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
            for key in stale:
                del self._entries[key]
            return len(stale)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"size": len(self._entries), "hits": self.hits, "misses": self.misses}


def cache_key(*args: Any, **kwargs: Any) -> str:
    """Digest positional and keyword arguments into a stable key."""
    parts = [repr(arg) for arg in args]
    parts.extend(f"{name}={value!r}" for name, value in sorted(kwargs.items()))
    return sha256("\x1f".join(parts).encode("utf-8")).hexdigest()
