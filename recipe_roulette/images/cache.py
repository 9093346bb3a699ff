from __future__ import annotations

import threading
import time
from collections.abc import Callable


class CachedImageLookup:
    """
    Memoise an image lookup by (trimmed) query for ``ttl`` seconds.

    A search result page asks for one image per recipe, so repeated titles
    and repeated pages are served without another round trip. Fallback URLs
    are cached too, which keeps an unreachable image service from costing a
    timeout per recipe.
    """

    def __init__(self, lookup: Callable[[str], str], ttl: float = 300.0) -> None:
        self._lookup = lookup
        self._ttl = ttl
        self._cache: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __call__(self, query: str) -> str:
        key = (query or "").strip()
        now = time.monotonic()
        with self._lock:
            entry = self._cache.get(key)
            if entry and now - entry[1] < self._ttl:
                self.hits += 1
                return entry[0]
            self.misses += 1

        url = self._lookup(key)
        with self._lock:
            self._cache[key] = (url, time.monotonic())
        return url

    def stats(self) -> dict:
        with self._lock:
            return {"size": len(self._cache), "hits": self.hits, "misses": self.misses}

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0
