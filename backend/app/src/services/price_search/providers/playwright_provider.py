"""Headless Chromium provider driving each retailer's search page."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Mapping, Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..extraction import select_listings
from ..models import PriceSearchError, RawListing, SourceDescriptor
from .base import BasePriceProvider

logger = logging.getLogger("price_search.playwright")

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]
VIEWPORT = {"width": 1366, "height": 768}


class PlaywrightPriceProvider(BasePriceProvider):
    """Load search pages in a fresh browser and read the product cards."""

    def __init__(
        self,
        page_load_timeout_ms: int = 15000,
        settle_delay_ms: int = 3000,
        headless: bool = True,
        user_agent: str | None = None,
        max_items: int = 10,
        task_timeout: float = 30.0,
    ) -> None:
        super().__init__(max_items=max_items, task_timeout=task_timeout)
        self.page_load_timeout_ms = page_load_timeout_ms
        self.settle_delay_ms = settle_delay_ms
        self.headless = headless
        self.user_agent = user_agent

    async def load_page(self, url: str, timeout_ms: int) -> str:
        """Navigate to ``url`` and return the rendered HTML.

        A browser is launched per call and always closed before returning.
        """
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
            try:
                context = await browser.new_context(
                    user_agent=self.user_agent, viewport=VIEWPORT
                )
                page = await context.new_page()
                logger.info("Loading: %s", url)
                try:
                    await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                except PlaywrightError as exc:
                    raise PriceSearchError(url, f"Navigation failed: {exc}") from exc

                # Product grids are rendered client side after DOMContentLoaded.
                await page.wait_for_timeout(self.settle_delay_ms)
                return await page.content()
            finally:
                await browser.close()

    def extract(
        self,
        html: str,
        selectors: Mapping[str, str],
        max_items: int,
    ) -> List[RawListing]:
        """Read raw listings from a page previously returned by ``load_page``."""
        return select_listings(html, selectors, max_items)

    async def _collect(
        self,
        source: SourceDescriptor,
        query: str,
        url: str,
        max_items: int,
    ) -> Sequence[RawListing]:
        logger.info("Scraping %s for '%s'", source.display_name, query)
        try:
            html = await self.load_page(url, self.page_load_timeout_ms)
        except PriceSearchError as exc:
            raise PriceSearchError(source.display_name, exc.message) from exc
        # CPU-bound page parse runs in a worker thread.
        return await asyncio.to_thread(self.extract, html, source.selectors, max_items)
