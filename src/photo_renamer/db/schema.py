"""Library database schema."""

from __future__ import annotations

CURRENT_SCHEMA_VERSION = 1

SCHEMA_V1 = """
CREATE TABLE IF NOT EXISTS tags (
    position INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS photos (
    id INTEGER PRIMARY KEY,
    position INTEGER NOT NULL,
    directory TEXT NOT NULL,
    name TEXT NOT NULL,
    base_name TEXT NOT NULL,
    extension TEXT NOT NULL,
    UNIQUE(directory, name)
);

CREATE TABLE IF NOT EXISTS photo_tags (
    photo_id INTEGER NOT NULL REFERENCES photos(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    tag_name TEXT NOT NULL,
    PRIMARY KEY (photo_id, position)
);

CREATE TABLE IF NOT EXISTS photo_history (
    photo_id INTEGER NOT NULL REFERENCES photos(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    name TEXT NOT NULL,
    PRIMARY KEY (photo_id, position)
);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_date TEXT
);
"""

CLEAR_LIBRARY = (
    "DELETE FROM photo_history",
    "DELETE FROM photo_tags",
    "DELETE FROM photos",
    "DELETE FROM tags",
)
