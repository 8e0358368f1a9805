"""SQLite storage for the tag vocabulary and photo registry."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

from photo_renamer.db.models import LibrarySnapshot, PhotoRecord
from photo_renamer.db.schema import (
    CLEAR_LIBRARY,
    CURRENT_SCHEMA_VERSION,
    SCHEMA_V1,
)

logger = logging.getLogger(__name__)


class LibraryStore:
    """Saves and restores a :class:`LibrarySnapshot` in a SQLite file.

    Every save replaces the previous contents. Loading never raises for a
    missing or damaged file: the problem is logged and ``None`` returned
    so the caller can start with an empty library.
    """

    def __init__(self, db_path: str | Path):
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        """Open (creating if needed) the database and ensure the schema."""
        if self._conn is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        try:
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.executescript(SCHEMA_V1)
            if self._get_schema_version() == 0:
                now = datetime.now(timezone.utc).isoformat()
                self._conn.execute(
                    "INSERT INTO schema_version (version, applied_date) VALUES (?, ?)",
                    (CURRENT_SCHEMA_VERSION, now),
                )
            self._conn.commit()
        except sqlite3.Error:
            self.close()
            raise

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for database transactions."""
        self._ensure_open()
        try:
            yield
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    # --- Snapshot I/O ---

    def save(self, snapshot: LibrarySnapshot) -> None:
        """Replace the stored library with *snapshot*."""
        self.open()
        with self.transaction():
            for statement in CLEAR_LIBRARY:
                self._conn.execute(statement)
            self._conn.executemany(
                "INSERT INTO tags (position, name) VALUES (?, ?)",
                list(enumerate(snapshot.tags)),
            )
            for position, photo in enumerate(snapshot.photos):
                self._conn.execute(
                    """INSERT INTO photos
                    (id, position, directory, name, base_name, extension)
                    VALUES (?, ?, ?, ?, ?, ?)""",
                    (photo.id, position, photo.directory, photo.name,
                     photo.base_name, photo.extension),
                )
                self._conn.executemany(
                    "INSERT INTO photo_tags (photo_id, position, tag_name) VALUES (?, ?, ?)",
                    [(photo.id, i, t) for i, t in enumerate(photo.tags)],
                )
                self._conn.executemany(
                    "INSERT INTO photo_history (photo_id, position, name) VALUES (?, ?, ?)",
                    [(photo.id, i, n) for i, n in enumerate(photo.history)],
                )
        logger.info(
            f"Saved {len(snapshot.tags)} tag(s) and {len(snapshot.photos)} "
            f"photo(s) to {self._db_path}"
        )

    def load(self) -> LibrarySnapshot | None:
        """Read the stored library, or None if there is nothing usable."""
        if not self._db_path.exists():
            logger.info(f"No saved library at {self._db_path}")
            return None
        try:
            self.open()
            return self._read_snapshot()
        except sqlite3.Error as e:
            logger.warning(f"Could not read library {self._db_path}: {e}")
            self.close()
            return None

    def _read_snapshot(self) -> LibrarySnapshot:
        tags = [
            row[0] for row in self._conn.execute(
                "SELECT name FROM tags ORDER BY position"
            )
        ]
        photos: list[PhotoRecord] = []
        by_id: dict[int, PhotoRecord] = {}
        for row in self._conn.execute(
            """SELECT id, directory, name, base_name, extension
            FROM photos ORDER BY position"""
        ):
            record = self._row_to_photo(row)
            photos.append(record)
            by_id[record.id] = record
        for photo_id, tag_name in self._conn.execute(
            "SELECT photo_id, tag_name FROM photo_tags ORDER BY photo_id, position"
        ):
            if photo_id in by_id:
                by_id[photo_id].tags.append(tag_name)
        for photo_id, name in self._conn.execute(
            "SELECT photo_id, name FROM photo_history ORDER BY photo_id, position"
        ):
            if photo_id in by_id:
                by_id[photo_id].history.append(name)
        return LibrarySnapshot(tags=tags, photos=photos)

    # --- Private helpers ---

    def _ensure_open(self) -> None:
        if self._conn is None:
            raise RuntimeError("Library database is not open")

    def _get_schema_version(self) -> int:
        try:
            row = self._conn.execute(
                "SELECT MAX(version) FROM schema_version"
            ).fetchone()
            return row[0] if row and row[0] else 0
        except sqlite3.OperationalError:
            return 0

    def _row_to_photo(self, row: tuple) -> PhotoRecord:
        return PhotoRecord(
            id=row[0],
            directory=row[1],
            name=row[2],
            base_name=row[3],
            extension=row[4],
        )
