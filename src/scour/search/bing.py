"""Bing search adapter."""

import logging
from urllib.parse import quote_plus

from scour.core.models import SearchEngine, SearchHit
from scour.infrastructure.storage import ProjectSession

from .base import SearchProviderRegistry
from .browser import BrowserSearchProvider

logger = logging.getLogger(__name__)

BING_SEARCH_URL = "https://www.bing.com/search?q={query}"


@SearchProviderRegistry.register
class BingSearchProvider(BrowserSearchProvider):
    """Bing web results, navigated by URL."""

    engine = SearchEngine.BING
    results_selector = "#b_results"
    next_page_selector = "a.sb_pagN"
    consent_selector = 'button[aria-label="Accept all"], #bnp_btn_accept'

    async def _open_results(self, page, query: str, session: ProjectSession) -> None:
        url = BING_SEARCH_URL.format(query=quote_plus(query))
        await page.goto(url, timeout=self.settings.search.navigation_timeout_ms)
        await self._report(session, f"Navigated to Bing with query: {query}")
        await self._accept_consent(page, session)

    async def _extract_page(self, page) -> list[SearchHit]:
        raw_hits = await self._extract_elements(page, "#b_results > li.b_algo", "h2 a", "h2", ".b_caption p")
        hits = [self._make_hit(raw) for raw in raw_hits]
        logger.debug("Bing page yielded %d hits", len(hits))
        return hits


__all__ = ["BingSearchProvider"]
