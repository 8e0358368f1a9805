"""Data models for saved library state."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PhotoRecord:
    """Saved state of a single photo."""

    id: int = 0
    directory: str = ""
    base_name: str = ""
    extension: str = ""
    name: str = ""
    tags: list[str] = field(default_factory=list)  # applied order
    history: list[str] = field(default_factory=list)  # oldest first


@dataclass
class LibrarySnapshot:
    """Tag vocabulary and photo registry, both in insertion order."""

    tags: list[str] = field(default_factory=list)
    photos: list[PhotoRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tags and not self.photos
