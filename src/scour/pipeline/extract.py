"""Page classification and extraction stage."""

import logging
from collections.abc import Iterator
from typing import Protocol

from scour.core.constants import DEFAULT_MAX_PAGE_CHARS
from scour.core.exceptions import ConfigurationError, LLMError, NoSearchResultsError
from scour.core.models import ColumnSpec, Row, SearchHit
from scour.infrastructure.storage import ProjectSession
from scour.llm.extractor import ExtractionClient

from .steps import Outcome, Stage, StageStep

logger = logging.getLogger(__name__)


class TextFetcher(Protocol):
    def fetch_text(self, url: str) -> str: ...


def find_resume_index(hits: list[SearchHit], rows: list[Row]) -> int:
    """Index of the first hit after the last admitted row's URL.

    Returns 0 when there are no rows or the last row's URL is not among the hits.
    """
    if not rows:
        return 0
    last_url = rows[-1].get("url")
    for index, hit in enumerate(hits):
        if hit.url == last_url:
            return index + 1
    logger.warning("Last processed URL %s not found in search results; starting from the first hit", last_url)
    return 0


def missing_required(columns: list[ColumnSpec], record: dict) -> list[str]:
    """Keys of required columns whose value is null or blank."""
    missing = []
    for column in columns:
        if not column.is_required:
            continue
        value = record.get(column.key)
        if value is None or not str(value).strip():
            missing.append(column.key)
    return missing


class PageExtractionStage:
    """Turns search hits into dataset rows.

    Each hit is one unit of work; ``current_search_result_index`` is
    persisted after every hit whatever the outcome.
    """

    def __init__(
        self,
        session: ProjectSession,
        extractor: ExtractionClient,
        fetcher: TextFetcher,
        max_page_chars: int = DEFAULT_MAX_PAGE_CHARS,
    ):
        self.session = session
        self.extractor = extractor
        self.fetcher = fetcher
        self.max_page_chars = max_page_chars

    def run(self) -> Iterator[StageStep]:
        """Process hits from the resume point to the end.

        Raises:
            NoSearchResultsError: If the project has no hits.
            ConfigurationError: If the project defines no columns.
        """
        project = self.session.project
        if not project.search_results:
            raise NoSearchResultsError("No search results found in project; run the search stage first")
        if not project.columns:
            raise ConfigurationError("Project defines no columns to extract")

        hits = list(project.search_results)
        processed = project.processed_urls()
        attempted: set[str] = set()

        start = find_resume_index(hits, project.rows)
        project.current_search_result_index = start
        self.session.save()

        for index in range(start, len(hits)):
            hit = hits[index]
            if hit.url in processed or hit.url in attempted:
                logger.info("Skipping already processed URL: %s", hit.url)
                outcome, detail = Outcome.DUPLICATE, "already processed"
            else:
                attempted.add(hit.url)
                outcome, detail = self._process_hit(hit, processed)

            project.current_search_result_index = index + 1
            self.session.save()

            yield StageStep(
                stage=Stage.EXTRACT,
                index=index,
                outcome=outcome,
                item=hit.url,
                added=1 if outcome is Outcome.ADMITTED else 0,
                message=detail,
            )

        self.session.report(f"Extraction complete: {len(project.rows)} rows")

    def _process_hit(self, hit: SearchHit, processed: set[str]) -> tuple[Outcome, str]:
        project = self.session.project
        objective = project.objective or ""

        self.session.report(f"Parsing page: {hit.url}")
        text = self.fetcher.fetch_text(hit.url)
        if not text or not text.strip():
            logger.warning("Failed to load page: %s", hit.url)
            return Outcome.EMPTY, "no page text"
        text = text[: self.max_page_chars]

        try:
            self.session.report("Querying LLM to validate data...")
            if not self.extractor.judge_relevance(objective, text):
                logger.info("Skipping page because it is not relevant: %s", hit.url)
                return Outcome.IRRELEVANT, "not relevant to the objective"

            self.session.report("Querying LLM to parse data...")
            record = self.extractor.extract_record(project.columns, text)
        except LLMError as e:
            logger.warning("Failed to parse page %s: %s", hit.url, e)
            return Outcome.FAILED, str(e)

        missing = missing_required(project.columns, record)
        if missing:
            logger.warning("Skipping page because required values are null or empty: %s", ", ".join(missing))
            return Outcome.DISCARDED, f"missing required: {', '.join(missing)}"

        row: Row = dict(record)
        row["url"] = hit.url
        project.rows.append(row)
        processed.add(hit.url)
        logger.info("Result: %s", row)
        return Outcome.ADMITTED, ""


__all__ = ["PageExtractionStage", "TextFetcher", "find_resume_index", "missing_required"]
