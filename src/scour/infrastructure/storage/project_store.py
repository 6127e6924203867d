"""Single-file JSON storage for projects."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from pydantic import ValidationError

from scour.core.exceptions import CorruptStateError, ProjectExistsError, ProjectNotFoundError, StorageError
from scour.core.models import Project

logger = logging.getLogger(__name__)


class ProjectStore:
    """Reads and writes one project file.

    Every save writes the full snapshot to a temporary sibling and renames it
    over the target, so readers never observe a partially written file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Project:
        """Deserialize the project file.

        Raises:
            ProjectNotFoundError: If the file does not exist.
            CorruptStateError: If the file is not valid JSON or violates the schema.
        """
        if not self.path.exists():
            raise ProjectNotFoundError(f"Project file not found: {self.path}")

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read project file {self.path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptStateError(f"Project file {self.path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise CorruptStateError(f"Project file {self.path} must contain a JSON object")

        try:
            return Project.model_validate(data)
        except ValidationError as exc:
            raise CorruptStateError(f"Project file {self.path} is malformed:\n{exc}") from exc

    def _file_mode(self) -> int:
        """Mode for the saved file: the existing file's, or the umask default for a new one."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, project: Project) -> None:
        """Persist the full project snapshot atomically."""
        payload = json.dumps(project.to_json_dict(), indent=4, ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(tmp_name, self._file_mode())
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StorageError(f"Failed to write project file {self.path}: {exc}") from exc

        logger.debug("Saved project %s", self.path)

    def create(self, project: Project) -> Project:
        """Write a new project file, refusing to overwrite an existing one."""
        if self.path.exists():
            raise ProjectExistsError(f"Project file already exists: {self.path}")
        self.save(project)
        logger.info("Initialized project file at %s", self.path)
        return project


__all__ = ["ProjectStore"]
