"""CSV reports, one file per schedule."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pagertally.core.errors import OutputError

from .summary import OutputData

logger = logging.getLogger(__name__)


def normalised_filename(schedule_name: str) -> str:
    """``"Platform Team"`` -> ``"platform_team.csv"``."""
    stem = re.sub(r"\s+", "_", schedule_name.strip().lower())
    stem = re.sub(r"[^\w.-]", "", stem) or "schedule"
    return f"{stem}.csv"


class CSVOutput:
    """Write ``<directory>/<normalised schedule name>.csv`` for every schedule.

    Paths written by the last :meth:`print` call are kept in ``written``.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.written: list[Path] = []

    def print(self, data: OutputData) -> None:
        self.written = []
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            for schedule in data.schedules:
                path = self.directory / normalised_filename(schedule.name)
                data.schedule_dataframe(schedule).to_csv(path, index=False)
                logger.info("Wrote %s", path)
                self.written.append(path)
        except OSError as exc:
            raise OutputError(f"failed to write CSV output to {self.directory}: {exc}") from exc


__all__ = ["CSVOutput", "normalised_filename"]
