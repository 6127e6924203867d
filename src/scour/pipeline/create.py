"""New project creation."""

from typing import Any

from scour import __version__
from scour.config.settings import Settings
from scour.core.models import Mode, Project, SearchEngine
from scour.infrastructure.storage import ProjectStore
from scour.utils.datetime import utc_now


def new_project(settings: Settings, **overrides: Any) -> Project:
    """Build a project from configured defaults.

    Keyword overrides use snake_case field names; ``None`` values are ignored.
    """
    defaults = settings.defaults
    fields: dict[str, Any] = {
        "mode": Mode(defaults.mode),
        "llm_provider": "ollama",
        "model": defaults.model,
        "ollama_url": settings.llm.host,
        "ollama_port": settings.llm.port,
        "created_at": utc_now(),
        "app_version": __version__,
        "search_engine": defaults.search_engine,
        "objective": None,
        "num_queries": defaults.num_queries,
        "num_results_per_query": defaults.num_results_per_query,
        "current_search_query_index": None,
        "current_search_result_index": None,
    }
    fields.update({key: value for key, value in overrides.items() if value is not None})

    engine = SearchEngine.parse(fields["search_engine"])
    if engine is not None:
        fields["search_engine"] = engine.value
    return Project(**fields)


def create_project(store: ProjectStore, settings: Settings, **overrides: Any) -> Project:
    """Create and persist a new project file.

    Raises:
        ProjectExistsError: If the file already exists.
    """
    project = new_project(settings, **overrides)
    return store.create(project)


__all__ = ["new_project", "create_project"]
