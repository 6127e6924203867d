"""Google search adapter."""

import logging

from scour.core.models import SearchEngine, SearchHit
from scour.infrastructure.storage import ProjectSession

from .base import SearchProviderRegistry, random_delay
from .browser import BrowserSearchProvider

logger = logging.getLogger(__name__)

GOOGLE_HOME_URL = "https://www.google.com"


@SearchProviderRegistry.register
class GoogleSearchProvider(BrowserSearchProvider):
    """Google web results, submitted through the search box.

    Sponsored results are extracted separately and flagged ``is_ad``.
    """

    engine = SearchEngine.GOOGLE
    results_selector = "#search"
    next_page_selector = "a#pnnext"
    consent_selector = 'button[aria-label="Accept all"], #L2AGLb'
    search_box_selector = 'textarea[name="q"]'

    async def _open_results(self, page, query: str, session: ProjectSession) -> None:
        await page.goto(GOOGLE_HOME_URL, timeout=self.settings.search.navigation_timeout_ms)
        await self._report(session, "Navigated to Google.")
        await self._accept_consent(page, session)

        await page.fill(self.search_box_selector, query)
        await self._report(session, f"Entered search query: {query}")

        delay = random_delay(self.settings.search)
        await self._report(session, f"Waiting {delay:.1f}s before submitting the search...")
        await self._sleep(delay)

        await page.press(self.search_box_selector, "Enter")
        await self._report(session, "Submitted search query.")

    async def _extract_page(self, page) -> list[SearchHit]:
        ads = await self._extract_elements(page, "div[data-text-ad]", "a", '[role="heading"]', ".MUxGbd")
        organic = await self._extract_elements(page, "#search .tF2Cxc", "a", "h3", ".VwiC3b")

        hits = [self._make_hit(raw, is_ad=True) for raw in ads]
        hits.extend(self._make_hit(raw) for raw in organic)
        logger.debug("Google page yielded %d ads and %d organic hits", len(ads), len(organic))
        return hits


__all__ = ["GoogleSearchProvider"]
