"""High-level service that orchestrates price lookups."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from configs import Settings, settings

from .cache import QueryCache
from .models import (
    FetchInProgressError,
    Origin,
    ProductRecord,
    ResolveResult,
    ServiceStatus,
    SourceDescriptor,
    SourceSummary,
    UnknownSourceError,
)
from .providers.base import BasePriceProvider
from .providers.catalog_provider import CatalogPriceProvider
from .providers.playwright_provider import PlaywrightPriceProvider
from .sample_data import generate_sample_records
from .sources import (
    PrefixSourceSelector,
    SourceSelector,
    create_source_selector,
    get_source,
    get_sources,
)
from .utils import normalize_query

logger = logging.getLogger("price_search.service")


class PriceSearchService:
    """Serve queries from cache, live fetch batches or sample data.

    At most one live batch runs at a time across all queries. A query that
    misses the cache while a batch is running is answered with sample data
    instead of waiting.
    """

    DEFAULT_SOURCE_LIMIT = 2

    def __init__(
        self,
        provider: BasePriceProvider,
        cache: QueryCache | None = None,
        sources: Sequence[SourceDescriptor] | None = None,
        selector: SourceSelector | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else QueryCache()
        self.sources: Tuple[SourceDescriptor, ...] = (
            tuple(sources) if sources is not None else get_sources()
        )
        self.selector = selector or PrefixSourceSelector(self.DEFAULT_SOURCE_LIMIT)
        self._clock = clock
        self._fetch_gate = asyncio.Lock()

    async def resolve(self, raw_query: str) -> ResolveResult:
        """Answer a query. Never raises; failures degrade to sample data."""
        started = self._clock()
        key = normalize_query(raw_query)
        try:
            records, origin = await self._resolve(key)
        except Exception:
            logger.exception("Search failed for '%s', serving sample data", key)
            records, origin = tuple(generate_sample_records(key)), Origin.SAMPLE

        elapsed_ms = (self._clock() - started) * 1000
        logger.info(
            "Resolved '%s' with %d records from %s in %.0fms",
            key,
            len(records),
            origin.value,
            elapsed_ms,
        )
        return ResolveResult(
            query=key, records=tuple(records), origin=origin, elapsed_ms=elapsed_ms
        )

    async def _resolve(self, key: str) -> Tuple[Sequence[ProductRecord], Origin]:
        entry = self.cache.get(key)
        if entry is not None:
            return entry.records, Origin.CACHE

        if self._fetch_gate.locked():
            logger.info("Live fetch already in progress, skipping fetch for '%s'", key)
        else:
            records = await self._live_fetch(key)
            if records:
                return records, Origin.LIVE

        return tuple(generate_sample_records(key)), Origin.SAMPLE

    async def _live_fetch(self, key: str) -> Tuple[ProductRecord, ...]:
        async with self._fetch_gate:
            selected = tuple(self.selector.select(self.sources))
            logger.info(
                "Starting live fetch for '%s' on %s",
                key,
                ", ".join(source.id for source in selected) or "no sources",
            )
            outcomes = await asyncio.gather(
                *(self.provider.fetch(source, key) for source in selected),
                return_exceptions=True,
            )

            merged: List[ProductRecord] = []
            for source, outcome in zip(selected, outcomes):
                if isinstance(outcome, BaseException):
                    logger.warning("%s: fetch task failed: %r", source.id, outcome)
                elif outcome:
                    merged.extend(outcome)
                    logger.info("%s: found %d products", source.id, len(outcome))
                else:
                    logger.info("%s: no results", source.id)

            # An empty entry would hide the query from later live attempts.
            if merged:
                self.cache.put(key, merged)
            return tuple(merged)

    async def scrape_source(self, source_id: str, raw_query: str) -> List[ProductRecord]:
        """Fetch one source directly, bypassing the cache."""
        source = get_source(source_id, self.sources)
        if source is None:
            raise UnknownSourceError(source_id)
        if self._fetch_gate.locked():
            raise FetchInProgressError("A live fetch is already in progress.")

        async with self._fetch_gate:
            logger.info("Manual scrape: %s for '%s'", source.id, raw_query)
            return await self.provider.fetch(source, normalize_query(raw_query))

    def list_sources(self) -> List[SourceSummary]:
        """Describe every source with the number of records it has in cache."""
        return [
            SourceSummary(
                id=source.id,
                display_name=source.display_name,
                live_record_count=self.cache.count_by_source(source.id),
            )
            for source in self.sources
        ]

    def status(self) -> ServiceStatus:
        return ServiceStatus(
            source_count=len(self.sources),
            cached_query_count=self.cache.size(),
            fetch_in_flight=self._fetch_gate.locked(),
        )


def create_provider(config: Settings) -> BasePriceProvider:
    """Build the fetch provider named by ``FETCH_BACKEND``."""
    if config.FETCH_BACKEND == "catalog":
        return CatalogPriceProvider(
            max_items=config.MAX_ITEMS_PER_SOURCE,
            task_timeout=config.TASK_TIMEOUT_SECONDS,
        )
    return PlaywrightPriceProvider(
        page_load_timeout_ms=config.PAGE_LOAD_TIMEOUT_MS,
        settle_delay_ms=config.SETTLE_DELAY_MS,
        headless=config.BROWSER_HEADLESS,
        user_agent=config.BROWSER_USER_AGENT,
        max_items=config.MAX_ITEMS_PER_SOURCE,
        task_timeout=config.TASK_TIMEOUT_SECONDS,
    )


def create_price_search_service(config: Settings) -> PriceSearchService:
    return PriceSearchService(
        provider=create_provider(config),
        cache=QueryCache(ttl_seconds=config.CACHE_TTL_SECONDS),
        selector=create_source_selector(config.SOURCE_SELECTION, config.FETCH_SOURCE_LIMIT),
    )


_SERVICE: Optional[PriceSearchService] = None


def get_price_search_service() -> PriceSearchService:
    """FastAPI dependency returning the process-wide search service."""
    global _SERVICE

    if _SERVICE is None:
        _SERVICE = create_price_search_service(settings)
    return _SERVICE
