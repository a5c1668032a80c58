"""Shared fixtures for price search tests."""

import asyncio
from typing import Dict, List, Optional, Sequence, Union

import pytest

from src.services.price_search.models import RawListing, SourceDescriptor
from src.services.price_search.providers.base import BasePriceProvider

Outcome = Union[Sequence[RawListing], BaseException, None]


class FakeProvider(BasePriceProvider):
    """Provider returning scripted listings per source id.

    An exception outcome is raised from ``_collect``. A ``release`` event, when
    given, keeps every task suspended until it is set; ``delay`` suspends each
    task for a fixed time.
    """

    def __init__(
        self,
        outcomes: Dict[str, Outcome],
        release: Optional[asyncio.Event] = None,
        hang: Sequence[str] = (),
        task_timeout: float = 1.0,
        delay: float = 0.0,
    ) -> None:
        super().__init__(max_items=10, task_timeout=task_timeout)
        self.outcomes = outcomes
        self.release = release
        self.hang = set(hang)
        self.delay = delay
        self.calls: List[tuple] = []

    async def _collect(self, source, query, url, max_items):
        self.calls.append((source.id, query))
        if source.id in self.hang:
            await asyncio.sleep(60)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.release is not None:
            await self.release.wait()
        outcome = self.outcomes.get(source.id) or []
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)[:max_items]


def make_source(source_id: str, name: Optional[str] = None) -> SourceDescriptor:
    return SourceDescriptor(
        id=source_id,
        display_name=name or source_id.title(),
        base_url=f"https://{source_id}.example",
        search_url_template=f"https://{source_id}.example/search?q={{query}}",
        selectors={
            "product_card": ".card",
            "name": ".name",
            "price": ".price",
            "original_price": ".was",
            "image": "img",
        },
    )


@pytest.fixture()
def two_sources() -> Sequence[SourceDescriptor]:
    return (make_source("metro", "Metro"), make_source("sobeys", "Sobeys"))
