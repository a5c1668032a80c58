"""Offline provider answering from a small canned catalog."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..models import RawListing, SourceDescriptor
from ..utils import normalize_query
from .base import BasePriceProvider

# category -> (name, price label, source id)
CATALOG: Dict[str, Tuple[Tuple[str, str, str], ...]] = {
    "bananas": (
        ("Bananas, per lb", "$1.47 / lb", "metro"),
        ("Organic Bananas, 2 lb", "$4.47", "sobeys"),
        ("Bananas, 3 lb bag", "$2.97", "walmart"),
    ),
    "milk": (
        ("2% Milk, 2L", "$3.97", "metro"),
        ("Whole Milk, 2L", "$4.17", "sobeys"),
        ("Organic Milk, 2L", "$5.47", "walmart"),
    ),
    "bread": (
        ("White Bread, 675g", "$2.97", "metro"),
        ("Whole Wheat Bread", "$3.47", "sobeys"),
    ),
}


class CatalogPriceProvider(BasePriceProvider):
    """Serve catalog entries whose category matches the query.

    A category matches when the query contains it or it contains the query,
    so "milk 2l" and "mil" both hit the milk category.
    """

    def __init__(
        self,
        catalog: Dict[str, Tuple[Tuple[str, str, str], ...]] | None = None,
        max_items: int = 10,
        task_timeout: float = 30.0,
    ) -> None:
        super().__init__(max_items=max_items, task_timeout=task_timeout)
        self.catalog = CATALOG if catalog is None else catalog

    async def _collect(
        self,
        source: SourceDescriptor,
        query: str,
        url: str,
        max_items: int,
    ) -> Sequence[RawListing]:
        wanted = normalize_query(query)
        listings: List[RawListing] = []
        for category, entries in self.catalog.items():
            if category not in wanted and wanted not in category:
                continue
            for name, price_text, source_id in entries:
                if source_id == source.id:
                    listings.append(RawListing(name=name, price_text=price_text))
        return listings[:max_items]
