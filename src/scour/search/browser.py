"""Shared browser-driven retrieval flow for search adapters."""

import asyncio
import logging
from abc import abstractmethod

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from scour.core.exceptions import BrowserUnavailableError, SearchResultsTimeoutError
from scour.core.models import SearchHit
from scour.infrastructure.browser import StealthOptions, create_stealth_context, launch_browser
from scour.infrastructure.storage import ProjectSession
from scour.utils.datetime import utc_now

from .base import BaseSearchProvider, dedupe_hits, random_delay

logger = logging.getLogger(__name__)

# Returns [{title, description, url}] for every element matching the selector.
# Arguments: [linkSelector, titleSelector, descriptionSelector].
EXTRACT_RESULTS_JS = """
(elements, [linkSelector, titleSelector, descriptionSelector]) => elements.map((el) => {
  const link = el.querySelector(linkSelector);
  const title = titleSelector ? el.querySelector(titleSelector) : link;
  const description = el.querySelector(descriptionSelector);
  return {
    title: title ? title.innerText.trim() : '',
    description: description ? description.innerText.trim() : '',
    url: link ? (link.href || link.getAttribute('href') || '') : '',
    className: el.className || ''
  };
})
"""


class BrowserSearchProvider(BaseSearchProvider):
    """Drives a stealth Chromium session through an engine's result pages.

    Subclasses supply the selectors, how to open the first result page, and
    how to extract hits from the current page.
    """

    results_selector: str
    next_page_selector: str
    consent_selector: str = 'button[aria-label="Accept all"]'
    delay_before_launch: bool = False

    def search(
        self,
        query: str,
        page_budget: int,
        session: ProjectSession,
        target_results: int | None = None,
    ) -> list[SearchHit]:
        try:
            return asyncio.run(self._search_async(query, page_budget, session, target_results))
        except BrowserUnavailableError as e:
            logger.error("Browser unavailable: %s", e)
            session.report(f"Failed to launch Chromium. Please make sure Chromium is installed correctly. ({e})")
            return []

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def _report(self, session: ProjectSession, message: str) -> None:
        # report() saves the project file; keep the disk write off the event loop
        await asyncio.to_thread(session.report, message)

    async def _search_async(
        self,
        query: str,
        page_budget: int,
        session: ProjectSession,
        target_results: int | None,
    ) -> list[SearchHit]:
        if self.delay_before_launch:
            delay = random_delay(self.settings.search)
            await self._report(session, f"Waiting {delay:.1f}s before launching Chromium...")
            await self._sleep(delay)

        async with async_playwright() as playwright:
            await self._report(session, "Launching browser...")
            browser = await launch_browser(playwright, self.settings.browser)
            try:
                await self._report(session, "Starting browser...")
                context = await create_stealth_context(browser, StealthOptions.from_config(self.settings.browser))

                await self._report(session, "Opening a new page...")
                page = await context.new_page()

                await self._report(session, f"Navigating to {self.name}...")
                await self._open_results(page, query, session)
                await self._wait_for_results(page, session)

                hits = await self._collect_pages(page, query, page_budget, session, target_results)
            finally:
                await self._report(session, "Closing browser...")
                await browser.close()

        await self._report(session, f"Search completed: {query}. Total results: {len(hits)}")
        return hits

    async def _accept_consent(self, page, session: ProjectSession) -> None:
        """Click a cookie-consent button if one shows up quickly."""
        await self._report(session, "Checking for cookie consent prompt...")
        try:
            await page.click(self.consent_selector, timeout=self.settings.search.consent_timeout_ms)
            await self._report(session, "Cookie consent accepted.")
        except (PlaywrightTimeoutError, PlaywrightError):
            await self._report(session, "No cookie prompt found.")

    async def _wait_for_results(self, page, session: ProjectSession) -> None:
        try:
            await page.wait_for_selector(self.results_selector, timeout=self.settings.search.results_timeout_ms)
        except PlaywrightTimeoutError as exc:
            await self._report(session, "Search results did not load within the timeout period.")
            raise SearchResultsTimeoutError(f"{self.name} search results did not load") from exc
        await self._report(session, "Search results loaded.")

    async def _collect_pages(
        self,
        page,
        query: str,
        page_budget: int,
        session: ProjectSession,
        target_results: int | None,
    ) -> list[SearchHit]:
        """Read up to ``page_budget`` result pages, then deduplicate."""
        hits: list[SearchHit] = []

        for page_number in range(1, page_budget + 1):
            await self._report(session, f"Reading page {page_number}...")
            page_hits = await self._extract_page(page)
            hits.extend(page_hits)
            await self._report(session, f"Extracted {len(page_hits)} results, total now {len(hits)}.")

            if self.stops_on_count and target_results and len(hits) >= target_results:
                await self._report(session, f'Collected enough results for query "{query}".')
                break
            if page_number >= page_budget:
                break

            next_control = await page.query_selector(self.next_page_selector)
            if not next_control:
                await self._report(session, "No more pages available.")
                break

            next_page = page_number + 1
            delay = random_delay(self.settings.search)
            await self._report(session, f"Waiting {delay:.1f}s before navigating to page {next_page}...")
            await self._sleep(delay)

            await self._report(session, f"Navigating to page {next_page}...")
            await next_control.click()
            try:
                await page.wait_for_selector(self.results_selector, timeout=self.settings.search.results_timeout_ms)
            except PlaywrightTimeoutError:
                await self._report(session, f"Page {next_page} did not load within the timeout period.")
                break
            await self._report(session, f"Page {next_page} loaded.")

        await self._report(session, "Removing duplicate URLs...")
        unique = dedupe_hits(hits, query)
        await self._report(session, f"Filtered duplicates. Unique results count: {len(unique)}")
        return unique

    async def _extract_elements(
        self,
        page,
        selector: str,
        link_selector: str,
        title_selector: str | None,
        description_selector: str,
    ) -> list[dict]:
        return await page.eval_on_selector_all(
            selector,
            EXTRACT_RESULTS_JS,
            [link_selector, title_selector, description_selector],
        )

    def _make_hit(self, raw: dict, is_ad: bool = False) -> SearchHit:
        return SearchHit(
            title=raw.get("title") or "No title",
            description=raw.get("description") or "No description",
            url=raw.get("url") or "",
            is_ad=is_ad,
            search_engine=self.engine.value,
            retrieved_at=utc_now(),
        )

    @abstractmethod
    async def _open_results(self, page, query: str, session: ProjectSession) -> None:
        """Navigate to the engine and submit the query."""
        ...

    @abstractmethod
    async def _extract_page(self, page) -> list[SearchHit]:
        """Extract hits from the current result page."""
        ...


__all__ = ["BrowserSearchProvider", "EXTRACT_RESULTS_JS"]
