from __future__ import annotations

import time
from typing import Any, Dict, Hashable, Tuple


class ExpiringCache:
    """In-process TTL cache with the ``get``/``set(key, value, ttl)`` shape of Django caches.

    Expired entries are dropped on every ``set``, so a long-lived instance
    only holds live answers.
    """

    def __init__(self, time_func=time.monotonic) -> None:
        self._time_func = time_func
        self._storage: Dict[Hashable, Tuple[float, Any]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        item = self._storage.get(key)
        if item is None:
            return default
        expires_at, value = item
        if expires_at < self._time_func():
            self._storage.pop(key, None)
            return default
        return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        now = self._time_func()
        self._purge(now)
        if ttl <= 0:
            return
        self._storage[key] = (now + ttl, value)

    def __len__(self) -> int:
        return len(self._storage)

    def clear(self) -> None:
        self._storage.clear()

    def _purge(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._storage.items() if expires_at < now]
        for key in expired:
            del self._storage[key]


__all__ = ["ExpiringCache"]
