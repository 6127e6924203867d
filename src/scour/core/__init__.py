"""Core domain models and exceptions."""

from .exceptions import (
    BrowserUnavailableError,
    ConfigurationError,
    CorruptStateError,
    GenerationFailure,
    LLMError,
    LLMResponseError,
    NoSearchResultsError,
    ProjectExistsError,
    ProjectNotFoundError,
    ScourError,
    SearchError,
    SearchResultsTimeoutError,
    StageError,
    StorageError,
    UnsupportedSearchEngineError,
)
from .models import ColumnSpec, Mode, Project, Row, SearchEngine, SearchHit

__all__ = [
    # Models
    "Project",
    "SearchHit",
    "ColumnSpec",
    "Row",
    "SearchEngine",
    "Mode",
    # Exceptions
    "ScourError",
    "ConfigurationError",
    "UnsupportedSearchEngineError",
    "StorageError",
    "ProjectNotFoundError",
    "ProjectExistsError",
    "CorruptStateError",
    "LLMError",
    "LLMResponseError",
    "StageError",
    "GenerationFailure",
    "NoSearchResultsError",
    "SearchError",
    "SearchResultsTimeoutError",
    "BrowserUnavailableError",
]
