"""CSV export of a project's rows."""

import csv
import logging
from pathlib import Path

from scour.core.exceptions import ConfigurationError, StorageError
from scour.core.models import Project

logger = logging.getLogger(__name__)

URL_HEADER = "URL"


def export_csv(project: Project, csv_path: Path | str) -> Path:
    """Write rows as CSV: one column per column spec, then ``URL``.

    Headers are column titles (falling back to the key). Null or missing
    values are written as empty strings.

    Raises:
        ConfigurationError: If the project defines no columns.
        StorageError: If the file cannot be written.
    """
    if not project.columns:
        raise ConfigurationError("Project defines no columns to export")

    path = Path(csv_path)
    keys = [column.key for column in project.columns] + ["url"]
    headers = [column.display_title for column in project.columns] + [URL_HEADER]

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for row in project.rows:
                writer.writerow(["" if row.get(key) is None else row.get(key) for key in keys])
    except OSError as exc:
        raise StorageError(f"Failed to write CSV file {path}: {exc}") from exc

    logger.info("Exported %d rows to %s", len(project.rows), path)
    return path


__all__ = ["export_csv"]
