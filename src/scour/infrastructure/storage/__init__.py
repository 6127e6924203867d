"""Project persistence."""

from .project_store import ProjectStore
from .session import ProjectSession

__all__ = ["ProjectStore", "ProjectSession"]
