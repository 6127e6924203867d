"""Pipeline stages and orchestration."""

from .create import create_project, new_project
from .export import export_csv
from .extract import PageExtractionStage, find_resume_index, missing_required
from .orchestrator import PIPELINE_STAGES, ScourPipeline, default_csv_path
from .queries import QueryGenerationStage, merge_queries
from .search import SearchRetrievalStage
from .steps import Outcome, Stage, StageResult, StageStep

__all__ = [
    "create_project",
    "new_project",
    # Stages
    "QueryGenerationStage",
    "SearchRetrievalStage",
    "PageExtractionStage",
    "export_csv",
    # Helpers
    "find_resume_index",
    "merge_queries",
    "missing_required",
    # Orchestration
    "ScourPipeline",
    "PIPELINE_STAGES",
    "default_csv_path",
    "Stage",
    "Outcome",
    "StageStep",
    "StageResult",
]
