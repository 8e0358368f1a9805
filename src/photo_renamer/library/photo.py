"""Photo model: a renameable image file whose name is derived from its tags."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from photo_renamer.library.naming import render_name, split_name
from photo_renamer.library.tag import Tag


class Photo:
    """One image file, its ordered tag set and every name it has held.

    The current name is always ``base_name`` followed by ``@tag`` for each
    tag in the order it was applied, then the extension. It is recomputed
    whenever the tag set changes. The reverse index on each :class:`Tag`
    is maintained by the :class:`~photo_renamer.library.manager.Manager`.
    """

    def __init__(self, photo_id: int, name: str, directory: str | Path):
        self._id = photo_id
        self._name = name
        self._directory = str(Path(directory))
        base, _tags, ext = split_name(name)
        self._base_name = base
        self._extension = ext
        self._tags: dict[str, Tag] = {}
        self._history: dict[str, None] = {}

    @classmethod
    def restore(
        cls,
        photo_id: int,
        directory: str | Path,
        base_name: str,
        extension: str,
        tags: Iterable[Tag],
        history: Iterable[str],
        name: str,
    ) -> Photo:
        """Rebuild a photo from saved state without recomputing anything."""
        photo = cls.__new__(cls)
        photo._id = photo_id
        photo._name = name
        photo._directory = str(Path(directory))
        photo._base_name = base_name
        photo._extension = extension
        photo._tags = {t.name: t for t in tags}
        photo._history = dict.fromkeys(history)
        return photo

    # --- Accessors ---

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def path(self) -> Path:
        return Path(self._directory) / self._name

    @property
    def key(self) -> tuple[str, str]:
        """Registry key for the current name."""
        return (self._directory, self._name)

    @property
    def base_name(self) -> str:
        return self._base_name

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def tags(self) -> list[str]:
        """Tag names in the order they were applied."""
        return list(self._tags)

    @property
    def tag_instances(self) -> list[Tag]:
        return list(self._tags.values())

    @property
    def tag_count(self) -> int:
        return len(self._tags)

    @property
    def history(self) -> list[str]:
        """Previous names, oldest first."""
        return list(self._history)

    def has_tag(self, tag_name: str) -> bool:
        return tag_name in self._tags

    def rendered_name(self) -> str:
        return render_name(self._base_name, self._tags, self._extension)

    # --- Tag set mutation ---

    def apply_tags(self, tags: Iterable[Tag]) -> None:
        """Append tags not already present, in order, then rename."""
        for tag in tags:
            if tag.name not in self._tags:
                self._tags[tag.name] = tag
        self._update_name()

    def remove_tag(self, tag: Tag) -> None:
        if tag.name in self._tags:
            del self._tags[tag.name]
            self._update_name()

    def clear_tags(self, reset_name: bool = True) -> None:
        """Drop every tag.

        With ``reset_name=False`` the name is left stale; the caller must
        apply the replacement tag set straight away so the intermediate
        untagged name never reaches the history.
        """
        self._tags.clear()
        if reset_name:
            self._update_name()

    def _update_name(self) -> None:
        new_name = self.rendered_name()
        if new_name == self._name:
            return
        self._history.pop(new_name, None)
        self._history[self._name] = None
        self._name = new_name

    def __repr__(self) -> str:
        return f"Photo(id={self._id}, name={self._name!r}, dir={self._directory!r})"
