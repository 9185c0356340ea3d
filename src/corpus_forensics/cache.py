"""
In-memory LRU cache for idempotent derivations.

A session keeps one instance per derivation (parsed patches by commit sha,
snapshot documents by ``sha:file``). Instances are owned by the session and
discarded with it on reload; nothing here is process-global.
"""

from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


class LRUCache(Generic[V]):
    """
    Fixed-capacity least-recently-used cache.

    Features:
    - ``get`` on a hit refreshes recency
    - ``set`` on a full cache silently evicts the least recently touched entry
    - single-writer, no locking
    """

    def __init__(self, capacity: int, name: str = "cache"):
        """
        Initialize cache.

        Args:
            capacity: Maximum number of entries (at least 1)
            name: Label used in debug logging
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.name = name
        self._entries: "OrderedDict[Hashable, V]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[V]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not present
        """
        try:
            self._entries.move_to_end(key)
        except KeyError:
            return None
        return self._entries[key]

    def set(self, key: Hashable, value: V) -> None:
        """
        Set value in cache, evicting the least recently used entry if full.

        Args:
            key: Cache key
            value: Value to cache
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            self._entries[key] = value
            return

        if len(self._entries) >= self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"{self.name}: evicted {evicted!r}")

        self._entries[key] = value

    def has(self, key: Hashable) -> bool:
        """Membership test that does not refresh recency."""
        return key in self._entries

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def keys(self) -> list:
        """Keys from least to most recently used."""
        return list(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._entries)
