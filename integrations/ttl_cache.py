from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """In-process expiry cache for reference data.

    Read-mostly and shared by concurrent tool calls; two misses on the same key
    may both load, and the later write wins.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        e = self._store.get(key)
        if not e:
            return None
        if e.expires_at <= self._clock():
            self._store.pop(key, None)
            return None
        return e.value

    def set(self, key: str, value: Any, ttl_sec: int) -> None:
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_sec)

    def clear(self) -> None:
        self._store.clear()

    async def cached(self, key: str, ttl_sec: int, loader: Callable[[], Awaitable[Any]]) -> Any:
        v = self.get(key)
        if v is not None:
            return v
        v = await loader()
        # None means "nothing there"; not cached so the next call retries
        if v is not None:
            self.set(key, v, ttl_sec)
        return v


# Process-wide cache for reference data
shared_cache = TTLCache()
