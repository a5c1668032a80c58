"""In-memory TTL cache for merged search results.

Entries are keyed by the normalized query and expire ``ttl_seconds`` after
they are stored. Expired entries are removed lazily on lookup or eagerly
through :meth:`QueryCache.purge_expired`. There is no size bound.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Iterator, Optional

from .models import CacheEntry, ProductRecord

logger = logging.getLogger("price_search.cache")

DEFAULT_TTL_SECONDS = 10 * 60


class QueryCache:
    """Map query keys to merged record sets with a fixed time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key`` or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for query: %s", key)
            return None

        if self._is_expired(entry, self._clock()):
            logger.debug("Cache expired for query: %s", key)
            self._entries.pop(key, None)
            return None

        logger.debug("Cache hit for query: %s", key)
        return entry

    def put(self, key: str, records: Iterable[ProductRecord]) -> CacheEntry:
        """Store ``records`` under ``key``, replacing any previous entry."""
        entry = CacheEntry(key=key, records=tuple(records), stored_at=self._clock())
        self._entries[key] = entry
        logger.debug("Cached %d records for query: %s", len(entry.records), key)
        return entry

    def _live_entries(self) -> Iterator[CacheEntry]:
        now = self._clock()
        for entry in list(self._entries.values()):
            if not self._is_expired(entry, now):
                yield entry

    def count_by_source(self, source_id: str) -> int:
        """Count records from ``source_id`` across all live entries."""
        return sum(
            1
            for entry in self._live_entries()
            for record in entry.records
            if record.source_id == source_id
        )

    def size(self) -> int:
        """Number of live entries."""
        return sum(1 for _ in self._live_entries())

    def __len__(self) -> int:
        return self.size()

    def invalidate(self, key: Optional[str] = None) -> None:
        """Drop one entry, or the whole cache when ``key`` is None."""
        if key is None:
            self._entries.clear()
            logger.debug("Cleared entire cache")
        elif self._entries.pop(key, None) is not None:
            logger.debug("Invalidated cache for query: %s", key)

    def purge_expired(self) -> int:
        """Remove expired entries now and return how many were dropped."""
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if self._is_expired(entry, now)
        ]
        for key in expired:
            del self._entries[key]
        logger.debug("Cleaned up %d expired cache entries", len(expired))
        return len(expired)
