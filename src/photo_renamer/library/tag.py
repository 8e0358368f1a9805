"""Tag model with its reverse index of tagged photos."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from photo_renamer.library.photo import Photo


class Tag:
    """A named label that knows which photos currently carry it."""

    def __init__(self, name: str):
        self._name = name
        # Keyed by photo id; photo names change on every retag.
        self._photos: dict[int, Photo] = {}

    @property
    def name(self) -> str:
        return self._name

    def on_photo_changed(self, photo: Photo) -> None:
        """Index or drop *photo* depending on whether it carries this tag."""
        if photo.has_tag(self._name):
            self._photos[photo.id] = photo
        else:
            self._photos.pop(photo.id, None)

    def photos_with_tag(self) -> list[Photo]:
        return list(self._photos.values())

    @property
    def photo_count(self) -> int:
        return len(self._photos)

    def __repr__(self) -> str:
        return f"Tag({self._name!r}, photos={len(self._photos)})"
