"""Search retrieval stage."""

import logging
from collections.abc import Iterator

from scour.config.settings import Settings
from scour.infrastructure.storage import ProjectSession
from scour.search import BaseSearchProvider, SearchProviderRegistry, page_budget_for

from .steps import Outcome, Stage, StageStep

logger = logging.getLogger(__name__)


class SearchRetrievalStage:
    """Runs every query through the project's search engine.

    ``current_search_query_index`` is the frontier: it advances after each
    query, failed or not, and is persisted together with that query's hits.
    """

    def __init__(
        self,
        session: ProjectSession,
        settings: Settings,
        provider: BaseSearchProvider | None = None,
    ):
        self.session = session
        self.settings = settings
        self._provider = provider

    def _resolve_provider(self) -> BaseSearchProvider:
        if self._provider is None:
            self._provider = SearchProviderRegistry.create(self.session.project.search_engine, self.settings)
        return self._provider

    def run(self, restart: bool = False) -> Iterator[StageStep]:
        """Retrieve hits for each pending query.

        Args:
            restart: Reset the query cursor to the first query before starting.

        Raises:
            UnsupportedSearchEngineError: If the project's engine has no adapter.
        """
        provider = self._resolve_provider()
        project = self.session.project

        if restart or project.current_search_query_index is None:
            project.current_search_query_index = 0
            self.session.save()

        num_results = project.num_results_per_query
        page_budget = page_budget_for(num_results)
        target_results = num_results if provider.stops_on_count else None

        start = project.current_search_query_index
        queries = list(project.search_queries)
        if start >= len(queries):
            logger.info("All %d queries already searched", len(queries))
            return

        for index in range(start, len(queries)):
            query = queries[index]
            self.session.report(f"Running search for query: {query}")
            self.session.refresh()

            try:
                hits = provider.search(query, page_budget, self.session, target_results=target_results)
                error = None
            except Exception as exc:
                logger.error("Search failed for query %r: %s", query, exc)
                hits, error = [], exc

            project = self.session.refresh()
            for hit in hits:
                hit.search_query = query
            known = project.hit_keys()
            new_hits = [hit for hit in hits[:num_results] if (hit.search_query, hit.url) not in known]

            project.search_results.extend(new_hits)
            project.current_search_query_index = index + 1
            if error is not None:
                project.status_message = f"Error occurred during search for query: {query} ({error})"
            else:
                project.status_message = f"Search results updated for query: {query}"
            self.session.save()

            yield StageStep(
                stage=Stage.SEARCH,
                index=index,
                outcome=Outcome.FAILED if error is not None else Outcome.RETRIEVED,
                item=query,
                added=len(new_hits),
                message=str(error) if error is not None else f"{len(new_hits)} new hits",
            )

        logger.info("Search complete: %d hits across %d queries", len(project.search_results), len(queries))


__all__ = ["SearchRetrievalStage"]
