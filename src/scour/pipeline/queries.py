"""Query generation stage."""

import logging
from collections.abc import Iterator

from scour.core.constants import DEFAULT_MAX_GENERATION_ROUNDS, DEFAULT_NUM_QUERIES
from scour.core.exceptions import GenerationFailure, LLMError
from scour.infrastructure.storage import ProjectSession
from scour.llm.extractor import ExtractionClient

from .steps import Outcome, Stage, StageStep

logger = logging.getLogger(__name__)


def merge_queries(existing: list[str], batch: list[str], target: int) -> list[str]:
    """Append unseen queries from ``batch`` and truncate to ``target``.

    Repeats within the batch and against ``existing`` are dropped by exact
    string equality; order is preserved.
    """
    seen = set(existing)
    merged = list(existing)
    for query in batch:
        if query in seen:
            continue
        seen.add(query)
        merged.append(query)
    return merged[:target]


class QueryGenerationStage:
    """Grows ``search_queries`` to the project's target count.

    Each model call is one unit of work: the merged list is persisted before
    the next call. Queries persisted before a failure are kept.
    """

    def __init__(
        self,
        session: ProjectSession,
        extractor: ExtractionClient,
        max_rounds: int = DEFAULT_MAX_GENERATION_ROUNDS,
    ):
        self.session = session
        self.extractor = extractor
        self.max_rounds = max_rounds

    def run(self) -> Iterator[StageStep]:
        """Generate queries until the target is reached.

        Raises:
            GenerationFailure: If the objective is missing, the model reply is
                unusable, the transport fails, or the round cap is exhausted.
        """
        project = self.session.project
        objective = (project.objective or "").strip()
        if not objective:
            raise GenerationFailure("Project has no objective; set one before generating queries")

        target = project.num_queries or DEFAULT_NUM_QUERIES
        rounds = 0

        while len(project.search_queries) < target:
            if rounds >= self.max_rounds:
                raise GenerationFailure(
                    f"Reached {self.max_rounds} generation rounds with "
                    f"{len(project.search_queries)}/{target} unique queries"
                )
            rounds += 1

            self.session.report(
                f"Generating queries... Current count: {len(project.search_queries)}, Target: {target}"
            )
            try:
                batch = self.extractor.generate_queries(objective)
            except LLMError as exc:
                logger.error("Query generation failed: %s", exc)
                raise GenerationFailure(f"Failed to generate queries: {exc}") from exc

            before = len(project.search_queries)
            project.search_queries = merge_queries(project.search_queries, batch, target)
            added = len(project.search_queries) - before
            self.session.report(f"Updated query count: {len(project.search_queries)}")

            yield StageStep(
                stage=Stage.QUERIES,
                index=rounds - 1,
                outcome=Outcome.GENERATED,
                added=added,
                message=f"{added} new of {len(batch)} returned",
            )

        logger.info("Project has %d queries", len(project.search_queries))


__all__ = ["QueryGenerationStage", "merge_queries"]
