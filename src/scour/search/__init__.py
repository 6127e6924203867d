"""Search provider adapters."""

from .base import BaseSearchProvider, SearchProviderRegistry, dedupe_hits, page_budget_for
from .bing import BingSearchProvider
from .browser import BrowserSearchProvider
from .duckduckgo import DuckDuckGoSearchProvider, extract_bare_url
from .google import GoogleSearchProvider

__all__ = [
    "BaseSearchProvider",
    "BrowserSearchProvider",
    "SearchProviderRegistry",
    "BingSearchProvider",
    "GoogleSearchProvider",
    "DuckDuckGoSearchProvider",
    "dedupe_hits",
    "extract_bare_url",
    "page_budget_for",
]
