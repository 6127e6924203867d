"""DuckDuckGo search adapter (HTML endpoint)."""

import logging
from urllib.parse import parse_qs, unquote, urljoin, urlparse

from scour.core.models import SearchEngine, SearchHit
from scour.infrastructure.storage import ProjectSession

from .base import SearchProviderRegistry
from .browser import BrowserSearchProvider

logger = logging.getLogger(__name__)

DUCKDUCKGO_HTML_URL = "https://html.duckduckgo.com/html/"


def extract_bare_url(href: str) -> str:
    """Unwrap a DuckDuckGo redirect link to its target URL.

    Links look like ``//duckduckgo.com/l/?uddg=<encoded target>&rut=...``.
    Anything else is returned unchanged.
    """
    if not href:
        return ""
    absolute = urljoin(DUCKDUCKGO_HTML_URL, href)
    parsed = urlparse(absolute)
    if parsed.netloc.endswith("duckduckgo.com") and parsed.path.startswith("/l/"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            return unquote(target[0])
    return href


@SearchProviderRegistry.register
class DuckDuckGoSearchProvider(BrowserSearchProvider):
    """DuckDuckGo results from the script-free HTML endpoint.

    Pagination stops as soon as enough results are collected.
    """

    engine = SearchEngine.DUCKDUCKGO
    stops_on_count = True
    delay_before_launch = True
    results_selector = ".results"
    next_page_selector = 'input.btn[type="submit"][value="Next"]'
    search_box_selector = 'input[name="q"]'

    async def _open_results(self, page, query: str, session: ProjectSession) -> None:
        await page.goto(DUCKDUCKGO_HTML_URL, timeout=self.settings.search.navigation_timeout_ms)
        await self._report(session, "Navigated to DuckDuckGo.")

        await page.fill(self.search_box_selector, query)
        await self._report(session, f"Entered search query: {query}")

        async with page.expect_navigation(timeout=self.settings.search.navigation_timeout_ms):
            await page.press(self.search_box_selector, "Enter")
        await self._report(session, "Submitted search query.")

    async def _extract_page(self, page) -> list[SearchHit]:
        raw_hits = await self._extract_elements(page, ".results .result", ".result__title a", None, ".result__snippet")

        hits = []
        for raw in raw_hits:
            raw = dict(raw, url=extract_bare_url(raw.get("url", "")))
            is_ad = "result--ad" in (raw.get("className") or "")
            hits.append(self._make_hit(raw, is_ad=is_ad))
        logger.debug("DuckDuckGo page yielded %d hits", len(hits))
        return hits


__all__ = ["DuckDuckGoSearchProvider", "extract_bare_url"]
