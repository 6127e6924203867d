"""Explicit project-state handle shared by stages and search adapters."""

import logging

from scour.core.models import Project

from .project_store import ProjectStore

logger = logging.getLogger(__name__)


class ProjectSession:
    """Holds the current project snapshot together with its store.

    Stages mutate ``project`` and call ``save()`` after each unit of work.
    Adapters publish live progress through ``report()``.
    """

    def __init__(self, store: ProjectStore, project: Project | None = None):
        self.store = store
        self.project = project if project is not None else store.load()

    @classmethod
    def open(cls, store: ProjectStore) -> "ProjectSession":
        return cls(store, store.load())

    def refresh(self) -> Project:
        """Replace the in-memory snapshot with the persisted one."""
        self.project = self.store.load()
        return self.project

    def save(self) -> None:
        self.store.save(self.project)

    def report(self, message: str) -> None:
        """Record a human-readable status on the project and persist it."""
        logger.info(message)
        self.project.status_message = message
        self.store.save(self.project)


__all__ = ["ProjectSession"]
