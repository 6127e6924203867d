"""Rendered plain-text extraction for a single URL."""

import asyncio
import logging

from playwright.async_api import async_playwright

from scour.config.settings import BrowserConfig
from scour.core.constants import DEFAULT_FETCH_TIMEOUT_MS

from .launcher import launch_browser
from .stealth import StealthOptions, create_stealth_context

logger = logging.getLogger(__name__)


class PageTextFetcher:
    """Loads a page in headless Chromium and returns its visible text.

    Every failure (missing browser, navigation error, timeout) is logged
    and surfaced as an empty string.
    """

    def __init__(self, config: BrowserConfig, timeout_ms: int = DEFAULT_FETCH_TIMEOUT_MS):
        self.config = config
        self.timeout_ms = timeout_ms

    def fetch_text(self, url: str) -> str:
        """Fetch rendered plain text for ``url`` ("" on failure)."""
        try:
            return asyncio.run(self._fetch_async(url))
        except Exception as e:
            logger.warning("Failed to extract plain text from %s: %s", url, e)
            return ""

    async def _fetch_async(self, url: str) -> str:
        async with async_playwright() as playwright:
            browser = await launch_browser(playwright, self.config, headless=True)
            try:
                context = await create_stealth_context(browser, StealthOptions.from_config(self.config))
                page = await context.new_page()

                logger.debug("Navigating to %s", url)
                await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)

                text = await page.evaluate("() => document.body ? document.body.innerText : ''")
                return text or ""
            finally:
                await browser.close()


__all__ = ["PageTextFetcher"]
