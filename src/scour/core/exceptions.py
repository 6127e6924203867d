"""Exception hierarchy for Scour.

Fatal-to-stage errors propagate out of a stage; recoverable per-item errors
are caught inside the stage loop and never escape it.
"""


class ScourError(Exception):
    """Base class for all Scour errors."""


# Configuration


class ConfigurationError(ScourError):
    """Invalid or missing configuration."""


class UnsupportedSearchEngineError(ConfigurationError):
    """Project is configured with a search engine that has no adapter."""

    def __init__(self, engine: str, supported: list[str] | None = None):
        self.engine = engine
        self.supported = supported or []
        message = f"Unsupported search engine: {engine!r}"
        if self.supported:
            message += f". Supported engines: {', '.join(self.supported)}"
        super().__init__(message)


# Storage


class StorageError(ScourError):
    """Project file could not be read or written."""


class ProjectNotFoundError(StorageError):
    """Project file does not exist."""


class ProjectExistsError(StorageError):
    """Refusing to overwrite an existing project file."""


class CorruptStateError(StorageError):
    """Project file is not well-formed JSON or violates the project schema."""


# LLM


class LLMError(ScourError):
    """LLM transport or API failure."""


class LLMResponseError(LLMError):
    """LLM replied, but the reply could not be parsed as expected."""

    def __init__(self, message: str, content: str | None = None):
        super().__init__(message)
        self.content = content


# Stages


class StageError(ScourError):
    """A pipeline stage could not run to completion."""


class GenerationFailure(StageError):
    """Query generation received an empty or schema-violating model reply."""


class NoSearchResultsError(StageError):
    """Page extraction was started on a project without search results."""


# Search


class SearchError(ScourError):
    """A single query's search failed."""


class SearchResultsTimeoutError(SearchError):
    """The results container did not appear within the timeout."""


class BrowserUnavailableError(SearchError):
    """No usable browser executable could be found or launched."""


__all__ = [
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
