"""Manager for the tag vocabulary and the photo registry."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Iterable, Sequence

from photo_renamer.changelog.log import ChangeLog
from photo_renamer.db.models import LibrarySnapshot, PhotoRecord
from photo_renamer.library.naming import (
    render_name,
    split_name,
    validate_tag_name,
)
from photo_renamer.library.photo import Photo
from photo_renamer.library.tag import Tag

logger = logging.getLogger(__name__)

PhotoKey = tuple[str, str]  # (directory, name)


class EventKind(Enum):
    VOCABULARY_CHANGED = auto()
    PHOTO_SET_CHANGED = auto()


@dataclass(frozen=True)
class ManagerEvent:
    """Change notification sent to listeners after a mutation completes."""

    kind: EventKind
    tag_name: str | None = None


Listener = Callable[[ManagerEvent], None]


class NameCollisionError(ValueError):
    """Raised when a retag would give a photo another photo's name."""


def _key(name: str, directory: str | Path) -> PhotoKey:
    return (str(Path(directory)), name)


class Manager:
    """Owns every Tag and Photo and is the only way to change a tag set.

    All index maintenance happens here: after any change to a photo's tags
    the Manager asks each affected Tag to re-check the photo, and moves the
    photo's registry entry to its new name. Listeners are notified once the
    whole operation has been applied.
    """

    def __init__(self, change_log: ChangeLog | None = None):
        self._tags: dict[str, Tag] = {}
        self._photos: dict[PhotoKey, Photo] = {}
        self._ids = itertools.count(0)
        self._listeners: list[Listener] = []
        self._change_log = change_log

    # --- Accessors ---

    @property
    def tags(self) -> list[str]:
        """Tag names in vocabulary order."""
        return list(self._tags)

    @property
    def tag_instances(self) -> list[Tag]:
        return list(self._tags.values())

    @property
    def photos(self) -> list[Photo]:
        return list(self._photos.values())

    @property
    def change_log(self) -> ChangeLog | None:
        return self._change_log

    def get_tag(self, name: str) -> Tag | None:
        return self._tags.get(name)

    def has_tag(self, name: str) -> bool:
        return name in self._tags

    def find_photo(self, name: str, directory: str | Path) -> Photo | None:
        return self._photos.get(_key(name, directory))

    def tags_for_photo(self, name: str, directory: str | Path) -> list[str]:
        return self.get_or_create_photo(name, directory).tags

    # --- Listeners ---

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _broadcast(self, kind: EventKind, tag_name: str | None = None) -> None:
        event = ManagerEvent(kind, tag_name)
        for listener in list(self._listeners):
            listener(event)

    # --- Photos ---

    def get_or_create_photo(self, name: str, directory: str | Path) -> Photo:
        """Look up a photo by name and directory, registering it on a miss.

        A new file whose name already encodes tags (``img@a@b.jpg``) gets
        those tags applied, creating any that are not yet in the vocabulary.
        """
        key = _key(name, directory)
        photo = self._photos.get(key)
        if photo is not None:
            return photo

        _base, encoded, _ext = split_name(name)
        tags = [self._resolve_tag(t) for t in encoded]
        photo = Photo(next(self._ids), name, directory)
        if tags:
            photo.apply_tags(tags)
            self._reindex(photo, tags)
        self._photos[key] = photo
        logger.debug(f"Registered photo {photo.id}: {photo.path}")
        return photo

    def set_photo_tag_set(
        self, name: str, directory: str | Path, tag_names: Sequence[str]
    ) -> Photo:
        """Replace a photo's tags with *tag_names*, in that order.

        Unknown tag names are added to the vocabulary. The photo is renamed
        and its registry entry moved; listeners are notified and the rename
        is written to the change log.
        """
        photo = self.get_or_create_photo(name, directory)
        for tag_name in tag_names:
            validate_tag_name(tag_name)
        ordered = list(dict.fromkeys(tag_names))
        target = render_name(photo.base_name, ordered, photo.extension)
        self._check_free(photo, target)

        tags = [self._resolve_tag(t) for t in ordered]
        old_key = photo.key
        old_name = photo.name
        previous = photo.tag_instances

        photo.clear_tags(reset_name=False)
        photo.apply_tags(tags)
        self._reindex(photo, previous + tags)
        self._relocate(old_key, photo)

        self._broadcast(EventKind.PHOTO_SET_CHANGED)
        if self._change_log is not None:
            self._change_log.record(old_name, photo.name, photo.directory)
        return photo

    def most_tagged(self, photos: Iterable[Photo] | None = None) -> list[Photo]:
        """Every photo tied for the highest tag count, in registration order.

        Photos without tags never qualify. *photos* restricts the candidates.
        """
        candidates = list(self._photos.values()) if photos is None else list(photos)
        top = max((p.tag_count for p in candidates), default=0)
        if top == 0:
            return []
        return sorted(
            (p for p in candidates if p.tag_count == top), key=lambda p: p.id
        )

    # --- Tags ---

    def add_tag(self, name: str) -> bool:
        """Add a tag to the vocabulary. Returns False if it already exists."""
        validate_tag_name(name)
        if name in self._tags:
            return False
        self._tags[name] = Tag(name)
        logger.debug(f"Added tag {name!r}")
        self._broadcast(EventKind.VOCABULARY_CHANGED, name)
        return True

    def delete_tag(self, name: str) -> dict[str, Photo]:
        """Remove a tag from every photo carrying it and from the vocabulary.

        Returns {old name: photo} for each photo that was renamed. Deleting
        an unknown tag is a no-op returning an empty dict.
        """
        renamed: dict[str, Photo] = {}
        tag = self._tags.get(name)
        if tag is None:
            return renamed

        carriers = tag.photos_with_tag()
        targets: dict[Photo, str] = {}
        for photo in carriers:
            remaining = [t for t in photo.tags if t != name]
            targets[photo] = render_name(photo.base_name, remaining, photo.extension)
        self._check_free_all(targets)

        for photo in carriers:
            old_name = photo.name
            self._unregister(photo)
            photo.remove_tag(tag)
            self._reindex(photo, [tag])
            if self._change_log is not None:
                self._change_log.record(old_name, photo.name, photo.directory)
            renamed[old_name] = photo
        for photo in carriers:
            self._photos[photo.key] = photo

        del self._tags[name]
        logger.debug(f"Deleted tag {name!r}, renamed {len(renamed)} photo(s)")
        self._broadcast(EventKind.VOCABULARY_CHANGED, name)
        return renamed

    def _resolve_tag(self, name: str) -> Tag:
        if name not in self._tags:
            self.add_tag(name)
        return self._tags[name]

    # --- Index maintenance ---

    def _reindex(self, photo: Photo, tags: Iterable[Tag]) -> None:
        for tag in {t.name: t for t in tags}.values():
            tag.on_photo_changed(photo)

    def _relocate(self, old_key: PhotoKey, photo: Photo) -> None:
        if old_key == photo.key:
            return
        if self._photos.get(old_key) is photo:
            del self._photos[old_key]
        self._photos[photo.key] = photo

    def _unregister(self, photo: Photo) -> None:
        if self._photos.get(photo.key) is photo:
            del self._photos[photo.key]

    def _check_free(self, photo: Photo, target: str) -> None:
        other = self._photos.get((photo.directory, target))
        if other is not None and other is not photo:
            raise NameCollisionError(
                f"{target} in {photo.directory} already belongs to photo {other.id}"
            )

    def _check_free_all(self, targets: dict[Photo, str]) -> None:
        moving = {p.key for p in targets}
        claimed: set[PhotoKey] = set()
        for photo, target in targets.items():
            key = (photo.directory, target)
            if key in claimed:
                raise NameCollisionError(
                    f"More than one photo would be renamed to {target}"
                )
            claimed.add(key)
            if key not in moving:
                self._check_free(photo, target)

    # --- Snapshot / restore ---

    def snapshot(self) -> LibrarySnapshot:
        """Copy of the vocabulary and registry suitable for :meth:`adopt`."""
        return LibrarySnapshot(
            tags=list(self._tags),
            photos=[
                PhotoRecord(
                    id=p.id,
                    directory=p.directory,
                    base_name=p.base_name,
                    extension=p.extension,
                    name=p.name,
                    tags=p.tags,
                    history=p.history,
                )
                for p in self._photos.values()
            ],
        )

    def adopt(self, snapshot: LibrarySnapshot) -> None:
        """Replace all state with a saved snapshot, as is."""
        self._tags = {name: Tag(name) for name in snapshot.tags}
        self._photos = {}
        for record in snapshot.photos:
            tags = []
            for tag_name in record.tags:
                if tag_name not in self._tags:
                    self._tags[tag_name] = Tag(tag_name)
                tags.append(self._tags[tag_name])
            photo = Photo.restore(
                record.id,
                record.directory,
                record.base_name,
                record.extension,
                tags,
                record.history,
                record.name,
            )
            self._reindex(photo, tags)
            self._photos[photo.key] = photo
        top = max((p.id for p in self._photos.values()), default=-1)
        self._ids = itertools.count(top + 1)
        logger.info(
            f"Adopted library with {len(self._tags)} tag(s) "
            f"and {len(self._photos)} photo(s)"
        )
        self._broadcast(EventKind.VOCABULARY_CHANGED)

    def check_consistency(self) -> list[str]:
        """Return a description of every broken invariant (empty if none)."""
        problems: list[str] = []
        registered = {id(p) for p in self._photos.values()}
        for key, photo in self._photos.items():
            if key != photo.key:
                problems.append(f"registry key {key} maps to {photo.key}")
            if photo.name != photo.rendered_name():
                problems.append(
                    f"{photo.name} should be named {photo.rendered_name()}"
                )
            if photo.name in photo.history:
                problems.append(f"{photo.name} is in its own history")
            for tag in photo.tag_instances:
                if self._tags.get(tag.name) is not tag:
                    problems.append(f"{photo.name} carries unknown tag {tag.name}")
                elif photo not in tag.photos_with_tag():
                    problems.append(f"tag {tag.name} does not index {photo.name}")
        for tag in self._tags.values():
            for photo in tag.photos_with_tag():
                if not photo.has_tag(tag.name):
                    problems.append(f"tag {tag.name} indexes untagged {photo.name}")
                if id(photo) not in registered:
                    problems.append(f"tag {tag.name} indexes unregistered {photo.name}")
        return problems
