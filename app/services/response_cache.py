"""In-process freshness window for successful catalog responses."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Hashable, Tuple


class CatalogResponseCache:
    """Keep relayed catalog bodies for a short TTL, keyed by query parameters."""

    def __init__(
        self,
        *,
        ttl_seconds: float = 60,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, key: Hashable) -> Any | None:
        """Return the cached body for ``key`` or ``None`` once it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, body = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            return None
        return body

    def set(self, key: Hashable, body: Any) -> None:
        if not self.enabled:
            return
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._evict()
        self._entries[key] = (self._clock(), body)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self) -> None:
        now = self._clock()
        expired = [
            key
            for key, (stored_at, _) in self._entries.items()
            if now - stored_at >= self._ttl
        ]
        for key in expired:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            # Oldest insertion goes first.
            oldest = next(iter(self._entries))
            del self._entries[oldest]


__all__ = ["CatalogResponseCache"]
