"""Base search provider definitions and registry."""

import logging
import math
import random
from abc import ABC, abstractmethod
from collections.abc import Iterable

from scour.config.settings import SearchConfig, Settings
from scour.core.constants import EXTRA_PAGES, RESULTS_PER_PAGE
from scour.core.exceptions import UnsupportedSearchEngineError
from scour.core.models import SearchEngine, SearchHit
from scour.infrastructure.storage import ProjectSession

logger = logging.getLogger(__name__)


class BaseSearchProvider(ABC):
    """Abstract base class for search-engine adapters."""

    engine: SearchEngine
    # Whether pagination stops once target_results hits are collected
    stops_on_count: bool = False

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def name(self) -> str:
        return self.engine.value

    @abstractmethod
    def search(
        self,
        query: str,
        page_budget: int,
        session: ProjectSession,
        target_results: int | None = None,
    ) -> list[SearchHit]:
        """Retrieve deduplicated, positioned hits for one query.

        Args:
            query: Search query text.
            page_budget: Maximum number of result pages to read.
            session: Project handle used for live status reporting.
            target_results: Result count after which count-bounded engines stop paginating.

        Returns:
            Hits with unique URLs, positions 1..N and ``search_query`` set.
            Empty when no browser is available.

        Raises:
            SearchError: If this query's search failed.
        """
        ...


class SearchProviderRegistry:
    """Closed mapping from engine to adapter class."""

    _providers: dict[SearchEngine, type[BaseSearchProvider]] = {}

    @classmethod
    def register(cls, provider_class: type[BaseSearchProvider]) -> type[BaseSearchProvider]:
        """Decorator to register a provider under its ``engine``."""
        cls._providers[provider_class.engine] = provider_class
        return provider_class

    @classmethod
    def get_provider(cls, engine: SearchEngine) -> type[BaseSearchProvider] | None:
        return cls._providers.get(engine)

    @classmethod
    def supported(cls) -> list[str]:
        return sorted(engine.value for engine in cls._providers)

    @classmethod
    def create(cls, engine_name: str, settings: Settings) -> BaseSearchProvider:
        """Instantiate the adapter for a configured engine name.

        Raises:
            UnsupportedSearchEngineError: If the name has no registered adapter.
        """
        engine = SearchEngine.parse(engine_name)
        provider_class = cls._providers.get(engine) if engine else None
        if provider_class is None:
            raise UnsupportedSearchEngineError(engine_name, cls.supported())
        return provider_class(settings)


# Helper functions


def dedupe_hits(hits: Iterable[SearchHit], query: str) -> list[SearchHit]:
    """Drop empty and repeated URLs (first occurrence wins), then number positions 1..N."""
    unique: list[SearchHit] = []
    seen: set[str] = set()
    for hit in hits:
        if not hit.url or hit.url in seen:
            continue
        seen.add(hit.url)
        unique.append(hit)

    for position, hit in enumerate(unique, start=1):
        hit.position = position
        hit.search_query = query
    return unique


def page_budget_for(num_results: int) -> int:
    """Estimate result pages needed for ``num_results`` hits, with headroom."""
    return math.ceil(max(num_results, 0) / RESULTS_PER_PAGE) + EXTRA_PAGES


def random_delay(config: SearchConfig) -> float:
    """Uniformly distributed pause between page loads, in seconds."""
    return random.uniform(config.delay_min_seconds, config.delay_max_seconds)


__all__ = [
    "BaseSearchProvider",
    "SearchProviderRegistry",
    "dedupe_hits",
    "page_budget_for",
    "random_delay",
]
