"""Base classes for price search providers."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Sequence

from ..extraction import extract_records
from ..models import PriceSearchError, ProductRecord, RawListing, SourceDescriptor
from ..sources import build_search_url

logger = logging.getLogger("price_search.provider")


class BasePriceProvider(ABC):
    """Common behaviour for fetch providers.

    ``fetch`` is the fetch task boundary: it makes a single attempt per
    source and query, bounded by ``task_timeout`` seconds, and maps every
    fault to an empty list so one source can never affect another.
    """

    def __init__(self, max_items: int = 10, task_timeout: float = 30.0) -> None:
        self.max_items = max_items
        self.task_timeout = task_timeout

    async def fetch(self, source: SourceDescriptor, query: str) -> List[ProductRecord]:
        """Public fetch entry point with error handling."""
        url = source.search_url_template
        try:
            url = build_search_url(source, query)
            raw_listings = await asyncio.wait_for(
                self._collect(source, query, url, self.max_items),
                timeout=self.task_timeout,
            )
            records = extract_records(raw_listings, source, datetime.now(timezone.utc))
        except PriceSearchError as exc:
            logger.warning("Provider failure for %s: %s", exc.site, exc.message)
            return []
        except asyncio.TimeoutError:
            logger.warning(
                "Fetch for %s timed out after %.1fs (%s)",
                source.display_name,
                self.task_timeout,
                url,
            )
            return []
        except Exception:
            logger.exception("Unexpected error fetching prices from %s", source.display_name)
            return []

        logger.info(
            "%s: extracted %d products for '%s'", source.display_name, len(records), query
        )
        return records[: self.max_items]

    @abstractmethod
    async def _collect(
        self,
        source: SourceDescriptor,
        query: str,
        url: str,
        max_items: int,
    ) -> Sequence[RawListing]:
        """Return raw listings for the given source and query."""
        raise NotImplementedError
