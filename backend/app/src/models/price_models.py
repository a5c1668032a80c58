"""Response models for the price search controllers."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.services.price_search.models import Origin, ProductRecord
from src.services.price_search.utils import format_cad


class ProductModel(BaseModel):
    """Product offer as exposed to the frontend."""

    name: str = Field(..., description="Product name as listed by the store.")
    price: float = Field(..., description="Current price in CAD.")
    price_text: str = Field(..., description="Formatted current price.")
    original_price: Optional[float] = Field(
        default=None, description="Regular price when the item is on sale."
    )
    savings: float = Field(0.0, description="Original price minus current price.")
    store: str = Field(..., description="Id of the source the offer came from.")
    image: Optional[str] = Field(default=None, description="Product image URL.")
    scraped_at: datetime = Field(..., description="When the offer was captured.")

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductModel":
        return cls(
            name=record.name,
            price=float(record.price),
            price_text=format_cad(record.price) or "",
            original_price=(
                float(record.original_price) if record.original_price is not None else None
            ),
            savings=float(record.savings),
            store=record.source_id,
            image=record.image_ref,
            scraped_at=record.captured_at,
        )


class SearchResponse(BaseModel):
    """Data model for the response of the search endpoint."""

    success: bool = True
    query: str = Field(..., description="Normalized query used for the lookup.")
    origin: Origin = Field(..., description="CACHE, LIVE or SAMPLE.")
    total_results: int
    elapsed_ms: float = Field(..., description="Time spent resolving the query.")
    results: List[ProductModel]
    timestamp: datetime


class StoreModel(BaseModel):
    id: str
    name: str
    status: str = "ACTIVE"
    products: int = Field(..., description="Cached records attributed to the store.")


class StoresResponse(BaseModel):
    success: bool = True
    stores: List[StoreModel]


class StatusResponse(BaseModel):
    """Data model for the response of the status endpoint."""

    success: bool = True
    status: str = "CONNECTED"
    stores: int = Field(..., description="Number of configured stores.")
    cached_queries: int = Field(..., description="Queries with a live cache entry.")
    scraping_active: bool = Field(..., description="Whether a live fetch is running.")
    timestamp: datetime


class ScrapeResponse(BaseModel):
    """Data model for the response of the manual scrape endpoint."""

    success: bool = True
    store: str
    query: str
    results: List[ProductModel]
    message: str
