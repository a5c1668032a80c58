"""Expose price search, store listing and status endpoints.

Every route delegates to the PriceSearchService and only shapes its
answers into response models.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from src.logger_config import get_logger
from src.models.price_models import (
    ProductModel,
    ScrapeResponse,
    SearchResponse,
    StatusResponse,
    StoreModel,
    StoresResponse,
)
from src.services.price_search.models import FetchInProgressError, UnknownSourceError
from src.services.price_search.service import (
    PriceSearchService,
    get_price_search_service,
)

logger = get_logger(__name__)

price_router = APIRouter(prefix="/api", tags=["Prices"])


@price_router.get("/status", response_model=StatusResponse)
def get_status(
    service: PriceSearchService = Depends(get_price_search_service),
) -> StatusResponse:
    """Report store count, cache size and whether a live fetch is running."""
    logger.info("Status check")
    current = service.status()
    return StatusResponse(
        stores=current.source_count,
        cached_queries=current.cached_query_count,
        scraping_active=current.fetch_in_flight,
        timestamp=datetime.now(timezone.utc),
    )


@price_router.get("/search/{query}", response_model=SearchResponse)
async def search_products(
    query: str,
    service: PriceSearchService = Depends(get_price_search_service),
) -> SearchResponse:
    """
    Search every store for a product.

    Args:
        query (str): Free-form product query.

    Returns:
        SearchResponse with the records and where they came from.
    """
    logger.info('Search request: "%s"', query)
    result = await service.resolve(query)
    return SearchResponse(
        query=result.query,
        origin=result.origin,
        total_results=len(result.records),
        elapsed_ms=round(result.elapsed_ms, 2),
        results=[ProductModel.from_record(record) for record in result.records],
        timestamp=datetime.now(timezone.utc),
    )


@price_router.get("/stores", response_model=StoresResponse)
def list_stores(
    service: PriceSearchService = Depends(get_price_search_service),
) -> StoresResponse:
    """List configured stores with their cached record counts."""
    return StoresResponse(
        stores=[
            StoreModel(
                id=summary.id,
                name=summary.display_name,
                products=summary.live_record_count,
            )
            for summary in service.list_sources()
        ]
    )


@price_router.post("/scrape/{store}/{query}", response_model=ScrapeResponse)
async def scrape_store(
    store: str,
    query: str,
    service: PriceSearchService = Depends(get_price_search_service),
) -> ScrapeResponse:
    """Trigger a one-off scrape of a single store. Results are not cached."""
    try:
        records = await service.scrape_source(store, query)
    except UnknownSourceError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except FetchInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ScrapeResponse(
        store=store,
        query=query,
        results=[ProductModel.from_record(record) for record in records],
        message=f"Found {len(records)} products",
    )
