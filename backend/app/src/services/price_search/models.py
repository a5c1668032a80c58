"""Domain models for price search results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class SourceDescriptor:
    """Retailer search endpoint together with its extraction selectors."""

    id: str
    display_name: str
    base_url: str
    search_url_template: str
    selectors: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the selector table so descriptors stay immutable for the run.
        object.__setattr__(self, "selectors", MappingProxyType(dict(self.selectors)))


@dataclass(slots=True)
class RawListing:
    """Unparsed values read from one product card."""

    name: str
    price_text: str
    original_price_text: Optional[str] = None
    image_ref: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ProductRecord:
    """Single validated offer attributed to a source."""

    name: str
    price: Decimal
    source_id: str
    captured_at: datetime
    original_price: Optional[Decimal] = None
    savings: Decimal = Decimal("0")
    image_ref: Optional[str] = None


class Origin(str, Enum):
    """Where a resolved result set came from."""

    CACHE = "CACHE"
    LIVE = "LIVE"
    SAMPLE = "SAMPLE"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Merged records stored for a query key."""

    key: str
    records: Tuple[ProductRecord, ...]
    stored_at: float


@dataclass(frozen=True, slots=True)
class ResolveResult:
    """Answer returned by the orchestrator for one query."""

    query: str
    records: Tuple[ProductRecord, ...]
    origin: Origin
    elapsed_ms: float = 0.0


@dataclass(frozen=True, slots=True)
class SourceSummary:
    id: str
    display_name: str
    live_record_count: int


@dataclass(frozen=True, slots=True)
class ServiceStatus:
    source_count: int
    cached_query_count: int
    fetch_in_flight: bool


class PriceSearchError(RuntimeError):
    """Raised when a provider cannot load or read a source's page."""

    def __init__(self, site: str, message: str) -> None:
        super().__init__(message)
        self.site = site
        self.message = message


class UnknownSourceError(LookupError):
    """Raised when a source id is not part of the registry."""

    def __init__(self, source_id: str) -> None:
        super().__init__(f"Unknown source: {source_id}")
        self.source_id = source_id


class FetchInProgressError(RuntimeError):
    """Raised when a manual scrape is requested while a batch holds the gate."""
