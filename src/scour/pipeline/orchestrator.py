"""Stage orchestrator.

Opens the project once per run, wires collaborators from settings, and
drives each stage's step stream to completion.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from scour.config.settings import Settings
from scour.core.constants import PROJECT_FILE_SUFFIX
from scour.infrastructure.browser import PageTextFetcher
from scour.infrastructure.storage import ProjectSession, ProjectStore
from scour.llm.base import BaseLLMProvider
from scour.llm.extractor import ExtractionClient
from scour.llm.factory import create_llm_client
from scour.search import BaseSearchProvider

from .export import export_csv
from .extract import PageExtractionStage, TextFetcher
from .queries import QueryGenerationStage
from .search import SearchRetrievalStage
from .steps import Outcome, Stage, StageResult, StageStep

logger = logging.getLogger(__name__)

StepCallback = Callable[[StageStep], None]

PIPELINE_STAGES = (Stage.QUERIES, Stage.SEARCH, Stage.EXTRACT)


def default_csv_path(project_path: Path) -> Path:
    """``foo.scour`` exports to ``foo.csv`` next to it."""
    if project_path.suffix == PROJECT_FILE_SUFFIX:
        return project_path.with_suffix(".csv")
    return project_path.with_name(project_path.name + ".csv")


class ScourPipeline:
    """Runs pipeline stages against one project file.

    Collaborators not passed in are built lazily from settings.
    """

    def __init__(
        self,
        store: ProjectStore,
        settings: Settings,
        llm: BaseLLMProvider | None = None,
        provider: BaseSearchProvider | None = None,
        fetcher: TextFetcher | None = None,
    ):
        """Initialize the pipeline.

        Args:
            store: Project file store.
            settings: Application settings.
            llm: LLM provider override (defaults to the project's Ollama endpoint).
            provider: Search adapter override (defaults to the project's engine).
            fetcher: Page text fetcher override (defaults to headless Chromium).
        """
        self.store = store
        self.settings = settings
        self._llm = llm
        self._provider = provider
        self._fetcher = fetcher

    def open_session(self) -> ProjectSession:
        return ProjectSession.open(self.store)

    def _get_extractor(self, session: ProjectSession) -> ExtractionClient:
        if self._llm is None:
            self._llm = create_llm_client(self.settings.llm, session.project)
        return ExtractionClient(self._llm, session.project.model)

    def _get_fetcher(self) -> TextFetcher:
        if self._fetcher is None:
            self._fetcher = PageTextFetcher(self.settings.browser, timeout_ms=self.settings.pipeline.fetch_timeout_ms)
        return self._fetcher

    def iter_stage(
        self,
        stage: Stage | str,
        session: ProjectSession | None = None,
        **options,
    ) -> Iterator[StageStep]:
        """Yield the steps of one stage.

        Options:
            restart (search): reset the query cursor before searching.
            output (export): CSV destination, defaults to the project path with ``.csv``.
        """
        stage = Stage(stage)
        session = session or self.open_session()
        logger.info("Running %s stage on %s", stage.value, self.store.path)

        if stage is Stage.QUERIES:
            runner = QueryGenerationStage(
                session,
                self._get_extractor(session),
                max_rounds=self.settings.pipeline.max_generation_rounds,
            )
            yield from runner.run()
        elif stage is Stage.SEARCH:
            runner = SearchRetrievalStage(session, self.settings, provider=self._provider)
            yield from runner.run(restart=options.get("restart", False))
        elif stage is Stage.EXTRACT:
            runner = PageExtractionStage(
                session,
                self._get_extractor(session),
                self._get_fetcher(),
                max_page_chars=self.settings.pipeline.max_page_chars,
            )
            yield from runner.run()
        else:
            output = options.get("output") or default_csv_path(self.store.path)
            path = export_csv(session.project, output)
            yield StageStep(
                stage=Stage.EXPORT,
                index=0,
                outcome=Outcome.EXPORTED,
                item=str(path),
                added=len(session.project.rows),
            )

    def run_stage(
        self,
        stage: Stage | str,
        on_step: StepCallback | None = None,
        session: ProjectSession | None = None,
        **options,
    ) -> StageResult:
        """Run one stage to completion and return its counters."""
        result = StageResult(stage=Stage(stage))
        for step in self.iter_stage(stage, session=session, **options):
            result.record(step)
            if on_step:
                on_step(step)
        logger.info("%s stage finished: %d steps, %d added", result.stage.value, result.steps, result.added)
        return result

    def run_all(self, on_step: StepCallback | None = None) -> list[StageResult]:
        """Run query generation, search retrieval and page extraction in order."""
        session = self.open_session()
        return [self.run_stage(stage, on_step=on_step, session=session) for stage in PIPELINE_STAGES]


__all__ = ["ScourPipeline", "PIPELINE_STAGES", "default_csv_path"]
