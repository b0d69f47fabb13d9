"""Ephemeral per-session cache.

Entries expire after a TTL and the cache holds a bounded number of them,
evicting the least recently used first. Nothing here is durable; losing the
contents only costs an extra store round-trip.
"""

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Optional


class EphemeralCache:
    """TTL key/value store with LRU eviction."""

    def __init__(
        self,
        default_ttl: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: Seconds an entry lives unless set() overrides it
            max_entries: Entries kept before the oldest is evicted
            clock: Monotonic time source in seconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self.clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()

    def get(self, key: str, default: Any = None) -> Any:
        """Return a live entry, or default if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return default
        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store an entry, evicting the least recently used ones if full."""
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (self.clock() + lifetime, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        self._purge()
        return len(self._entries)

    def _purge(self) -> None:
        now = self.clock()
        for key in [k for k, (exp, _) in self._entries.items() if now >= exp]:
            del self._entries[key]


_MISSING = object()
