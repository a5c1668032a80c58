"""Test the price search HTTP routes."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.controllers.price_controllers import price_router
from src.services.price_search.cache import QueryCache
from src.services.price_search.providers.catalog_provider import CatalogPriceProvider
from src.services.price_search.service import (
    PriceSearchService,
    get_price_search_service,
)
from src.services.price_search.sources import PrefixSourceSelector


class TestPriceControllers:
    """Test cases for the /api routes backed by the catalog provider."""

    def setup_method(self) -> None:
        self.service = PriceSearchService(
            provider=CatalogPriceProvider(),
            cache=QueryCache(),
            selector=PrefixSourceSelector(2),
        )
        app = FastAPI()
        app.include_router(price_router)
        app.dependency_overrides[get_price_search_service] = lambda: self.service
        self.client = TestClient(app)

    def test_search_returns_live_then_cached_results(self) -> None:
        first = self.client.get("/api/search/Milk")
        second = self.client.get("/api/search/milk")

        assert first.status_code == 200
        body = first.json()
        assert body["success"] is True
        assert body["query"] == "milk"
        assert body["origin"] == "LIVE"
        assert body["total_results"] == 1
        assert body["results"][0]["name"] == "2% Milk, 2L"
        assert body["results"][0]["price"] == 3.97
        assert body["results"][0]["price_text"] == "$3.97"
        assert body["results"][0]["store"] == "metro"
        assert second.json()["origin"] == "CACHE"

    def test_search_without_matches_returns_sample_data(self) -> None:
        response = self.client.get("/api/search/unobtainium")

        body = response.json()
        assert response.status_code == 200
        assert body["origin"] == "SAMPLE"
        assert [item["store"] for item in body["results"]] == [
            "metro",
            "loblaws",
            "sobeys",
        ]

    def test_stores_report_cached_product_counts(self) -> None:
        self.client.get("/api/search/milk")

        stores = self.client.get("/api/stores").json()["stores"]

        assert [(s["id"], s["name"], s["products"]) for s in stores] == [
            ("metro", "Metro", 1),
            ("loblaws", "Loblaws", 0),
            ("sobeys", "Sobeys", 0),
            ("walmart", "Walmart", 0),
        ]
        assert all(s["status"] == "ACTIVE" for s in stores)

    def test_status_reports_counts(self) -> None:
        self.client.get("/api/search/bread")

        body = self.client.get("/api/status").json()

        assert body["status"] == "CONNECTED"
        assert body["stores"] == 4
        assert body["cached_queries"] == 1
        assert body["scraping_active"] is False

    def test_manual_scrape(self) -> None:
        response = self.client.post("/api/scrape/sobeys/milk")

        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "Found 1 products"
        assert body["results"][0]["price"] == 4.17
        assert self.service.cache.get("milk") is None

    def test_manual_scrape_unknown_store(self) -> None:
        response = self.client.post("/api/scrape/costco/milk")

        assert response.status_code == 404
        assert "costco" in response.json()["detail"]
