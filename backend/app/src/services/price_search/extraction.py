"""Turn rendered search pages into validated product records."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from bs4 import BeautifulSoup, Tag

from .models import ProductRecord, RawListing, SourceDescriptor
from .utils import normalize_whitespace, parse_price

logger = logging.getLogger("price_search.extraction")


def _text_of(card: Tag, selector: Optional[str]) -> Optional[str]:
    if not selector:
        return None
    element = card.select_one(selector)
    if element is None:
        return None
    text = normalize_whitespace(element.get_text(" ", strip=True))
    return text or None


def _image_of(card: Tag, selector: Optional[str]) -> Optional[str]:
    if not selector:
        return None
    element = card.select_one(selector)
    if element is None:
        return None
    return element.get("src") or element.get("data-src") or None


def select_listings(
    html: str,
    selectors: Mapping[str, str],
    max_items: int,
) -> List[RawListing]:
    """Read product cards from a rendered search page.

    Only the first ``max_items`` cards are inspected. Cards without a name or
    a price element are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    cards = soup.select(selectors["product_card"])
    listings: List[RawListing] = []
    for card in cards[:max_items]:
        name = _text_of(card, selectors.get("name"))
        price_text = _text_of(card, selectors.get("price"))
        if not name or not price_text:
            continue
        listings.append(
            RawListing(
                name=name,
                price_text=price_text,
                original_price_text=_text_of(card, selectors.get("original_price")),
                image_ref=_image_of(card, selectors.get("image")),
            )
        )
    return listings


def extract_records(
    raw_listings: Iterable[RawListing],
    source: SourceDescriptor,
    captured_at: datetime,
) -> List[ProductRecord]:
    """Validate raw listings and stamp them with their source.

    Listings whose price does not parse to a positive number are dropped.
    The original price is kept only when it parses; savings are computed
    from it, otherwise they are zero.
    """
    records: List[ProductRecord] = []
    for raw in raw_listings:
        name = normalize_whitespace(raw.name or "")
        price = parse_price(raw.price_text)
        if not name or price is None or price <= 0:
            logger.debug("Dropping listing from %s: %r", source.id, raw)
            continue

        original_price = parse_price(raw.original_price_text)
        savings = Decimal("0")
        if original_price is not None:
            savings = original_price - price

        records.append(
            ProductRecord(
                name=name,
                price=price,
                source_id=source.id,
                captured_at=captured_at,
                original_price=original_price,
                savings=savings,
                image_ref=raw.image_ref,
            )
        )
    return records
