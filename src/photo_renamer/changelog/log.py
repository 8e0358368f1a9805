"""Append-only record of every rename, with read-back for display."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M.%S"
FIELDNAMES = ["timestamp", "old_name", "new_name", "directory"]


@dataclass
class ChangeLogEntry:
    """One rename: the name before, the name after and when it happened."""

    timestamp: str
    old_name: str
    new_name: str
    directory: str = ""

    def __str__(self) -> str:
        return (
            f"Previous name: {self.old_name}, New name: {self.new_name}, "
            f"Date: {self.timestamp}"
        )


class ChangeLog:
    """CSV backed change log. With no path, entries are kept in memory."""

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path) if path else None
        self._memory: list[ChangeLogEntry] = []

    @property
    def path(self) -> Path | None:
        return self._path

    def record(
        self,
        old_name: str,
        new_name: str,
        directory: str = "",
        when: datetime | None = None,
    ) -> ChangeLogEntry:
        """Append an entry and return it."""
        stamp = (when or datetime.now()).strftime(TIMESTAMP_FORMAT)
        entry = ChangeLogEntry(stamp, old_name, new_name, directory)
        logger.info(str(entry))
        if self._path is None:
            self._memory.append(entry)
            return entry

        try:
            is_new = not self._path.exists()
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
                if is_new:
                    writer.writeheader()
                writer.writerow({
                    "timestamp": entry.timestamp,
                    "old_name": entry.old_name,
                    "new_name": entry.new_name,
                    "directory": entry.directory,
                })
        except OSError as e:
            logger.error(f"Failed to write change log {self._path}: {e}")
        return entry

    def entries(self) -> list[ChangeLogEntry]:
        """Every entry in append order. A missing log file reads as empty."""
        if self._path is None:
            return list(self._memory)
        if not self._path.exists():
            return []
        with open(self._path, "r", newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            return [
                ChangeLogEntry(
                    timestamp=row.get("timestamp", ""),
                    old_name=row.get("old_name", ""),
                    new_name=row.get("new_name", ""),
                    directory=row.get("directory") or "",
                )
                for row in reader
            ]
