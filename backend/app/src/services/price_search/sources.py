"""Registry of the retailers the aggregator knows how to search."""

from __future__ import annotations

import itertools
from typing import Optional, Protocol, Sequence, Tuple
from urllib.parse import quote

from .models import SourceDescriptor

SOURCES: Tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        id="metro",
        display_name="Metro",
        base_url="https://www.metro.ca",
        search_url_template="https://www.metro.ca/en/online-grocery/search?filter={query}",
        selectors={
            "product_card": ".pt-tile-product, .product-tile",
            "name": ".pt-title, .product-name, h3",
            "price": ".pricing__price, .pt-price, .price",
            "original_price": ".pricing__was-price, .original-price",
            "image": ".pt-product-image img, .product-image img",
        },
    ),
    SourceDescriptor(
        id="loblaws",
        display_name="Loblaws",
        base_url="https://www.loblaws.ca",
        search_url_template="https://www.loblaws.ca/search?search-bar={query}",
        selectors={
            "product_card": ".product-tile, .product-card",
            "name": ".product-name, .product-title, h3",
            "price": ".selling-price, .price-current, .price",
            "original_price": ".comparison-price, .was-price",
            "image": ".product-image img, .product-tile__thumbnail img",
        },
    ),
    SourceDescriptor(
        id="sobeys",
        display_name="Sobeys",
        base_url="https://www.sobeys.com",
        search_url_template="https://www.sobeys.com/en/search/?q={query}",
        selectors={
            "product_card": ".product-tile, .product-item",
            "name": ".product-item-title, .product-name",
            "price": ".price-current, .product-price, .price",
            "original_price": ".price-was, .original-price",
            "image": ".product-image img",
        },
    ),
    SourceDescriptor(
        id="walmart",
        display_name="Walmart",
        base_url="https://www.walmart.ca",
        search_url_template="https://www.walmart.ca/search?q={query}",
        selectors={
            "product_card": '.product-item, [data-automation-id="product-tile"]',
            "name": '.product-title, [data-automation-id="name"]',
            "price": '.price-current, [data-automation-id="price"]',
            "original_price": ".price-was, .strikethrough",
            "image": ".product-image img",
        },
    ),
)


def get_sources() -> Tuple[SourceDescriptor, ...]:
    """Return every configured source in registry order."""
    return SOURCES


def get_source(
    source_id: str,
    sources: Optional[Sequence[SourceDescriptor]] = None,
) -> Optional[SourceDescriptor]:
    """Look up a source by id, ignoring case, in ``sources`` or the registry."""
    wanted = source_id.strip().lower()
    for source in SOURCES if sources is None else sources:
        if source.id == wanted:
            return source
    return None


def build_search_url(source: SourceDescriptor, query: str) -> str:
    """Substitute the URL-encoded query into the source's search template."""
    return source.search_url_template.format(query=quote(query, safe=""))


class SourceSelector(Protocol):
    """Policy deciding which sources take part in a batch."""

    def select(self, sources: Sequence[SourceDescriptor]) -> Sequence[SourceDescriptor]:
        ...


class PrefixSourceSelector:
    """Always pick the first ``limit`` sources of the registry."""

    def __init__(self, limit: int) -> None:
        self.limit = max(limit, 0)

    def select(self, sources: Sequence[SourceDescriptor]) -> Sequence[SourceDescriptor]:
        return tuple(sources[: self.limit])


class RotatingSourceSelector:
    """Slide a window of ``limit`` sources one step forward on every batch."""

    def __init__(self, limit: int) -> None:
        self.limit = max(limit, 0)
        self._offsets = itertools.count()

    def select(self, sources: Sequence[SourceDescriptor]) -> Sequence[SourceDescriptor]:
        if not sources or not self.limit:
            return ()
        start = next(self._offsets) % len(sources)
        size = min(self.limit, len(sources))
        return tuple(sources[(start + i) % len(sources)] for i in range(size))


def create_source_selector(policy: str, limit: int) -> SourceSelector:
    """Build the selector named by the ``SOURCE_SELECTION`` setting."""
    if policy == "rotate":
        return RotatingSourceSelector(limit)
    return PrefixSourceSelector(limit)
