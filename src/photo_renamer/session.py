"""Session: the working context that ties the library to files on disk.

A session holds one Manager, one action per mode, the images currently
being browsed and the single working file. It routes user requests to the
active action or to the Manager and keeps the files on disk renamed to
match. Open it before use and close it to save the library::

    with Session.from_config(config) as session:
        session.set_viewing_images(session.scan(directory))
        ...
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from photo_renamer.actions.base import Action
from photo_renamer.actions.reverting import RevertingAction
from photo_renamer.actions.tagging import TaggingAction
from photo_renamer.changelog.log import ChangeLog, ChangeLogEntry
from photo_renamer.config.config import ConfigManager
from photo_renamer.db.store import LibraryStore
from photo_renamer.files import rename_photo_file
from photo_renamer.library.manager import Manager
from photo_renamer.library.photo import Photo
from photo_renamer.scanner.scanner import ImageScanner

logger = logging.getLogger(__name__)


class Session:
    """Coordinates the Manager, the two actions and the files being viewed."""

    def __init__(
        self,
        store: LibraryStore | None = None,
        change_log: ChangeLog | None = None,
        scanner: ImageScanner | None = None,
        save_on_close: bool = True,
    ):
        self._store = store
        self._save_on_close = save_on_close
        self._scanner = scanner or ImageScanner()
        self._manager = Manager(change_log if change_log is not None else ChangeLog())
        self._actions: dict[str, Action] = {
            TaggingAction.label: TaggingAction(self._manager),
            RevertingAction.label: RevertingAction(self._manager),
        }
        self._active: Action = self._actions[TaggingAction.label]
        self._viewing: list[Path] = []
        self._working: Path | None = None
        # Files the library renamed but the disk did not, by physical path
        self._unrenamed: dict[Path, Photo] = {}
        self._is_open = False

    @classmethod
    def from_config(cls, config: ConfigManager) -> Session:
        store = LibraryStore(config.get("library.path", ".photo_renamer.db"))
        change_log = ChangeLog(
            config.get("change_log.path") if config.get("change_log.enabled", True) else None
        )
        return cls(
            store=store,
            change_log=change_log,
            scanner=ImageScanner(config),
            save_on_close=config.get("library.save_on_close", True),
        )

    @property
    def manager(self) -> Manager:
        return self._manager

    # --- Lifecycle ---

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        """Load the saved library, if any. Starts empty when it can't be read."""
        if self._is_open:
            return
        if self._store is not None:
            snapshot = self._store.load()
            if snapshot is not None:
                self._manager.adopt(snapshot)
        self._is_open = True

    def close(self) -> None:
        """Save the library (unless disabled) and release the store."""
        if not self._is_open:
            return
        self._is_open = False
        if self._store is not None:
            try:
                if self._save_on_close:
                    self._store.save(self._manager.snapshot())
            except (sqlite3.Error, OSError) as e:
                logger.warning(f"Could not save library {self._store.db_path}: {e}")
            finally:
                self._store.close()

    def __enter__(self) -> Session:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- Viewing images ---

    def scan(self, directory: str | Path) -> list[Path]:
        """Find every image under *directory*."""
        return self._scanner.find_images(directory)

    def is_image(self, path: str | Path) -> bool:
        return self._scanner.is_image(path)

    @property
    def viewing_images(self) -> list[Path]:
        return list(self._viewing)

    def set_viewing_images(self, paths: Iterable[str | Path] | None) -> None:
        """Browse *paths*, keeping only image files. None clears the list.

        Each image is registered with the Manager in the order given.
        """
        if paths is None:
            self._viewing = []
        else:
            self._viewing = [Path(p) for p in paths if self.is_image(p)]
        for path in self._viewing:
            self._photo_for(path)
        if self._working is not None and self._working not in self._viewing:
            self.set_working_file(None)

    # --- Working file ---

    @property
    def working_file(self) -> Path | None:
        return self._working

    @property
    def working_photo(self) -> Photo | None:
        return self._active.working_photo

    def set_working_file(self, path: str | Path | None) -> Path | None:
        """Make *path* the working file.

        Only a file among the viewing images can be worked on; anything
        else leaves no working file. Every action is reset to the new photo.
        """
        path = Path(path) if path is not None else None
        if path is None or path not in self._viewing:
            self._working = None
            photo = None
        else:
            self._working = path
            photo = self._photo_for(path)
        for action in self._actions.values():
            action.reset(photo)
        return self._working

    def _photo_for(self, path: Path) -> Photo:
        photo = self._unrenamed.get(path)
        if photo is not None:
            return photo
        return self._manager.get_or_create_photo(path.name, path.parent)

    def _physical_path(self, photo: Photo) -> Path:
        for path, unrenamed in self._unrenamed.items():
            if unrenamed is photo:
                return path
        return photo.path

    # --- Actions ---

    @property
    def action_labels(self) -> list[str]:
        return list(self._actions)

    @property
    def action_label(self) -> str:
        return self._active.label

    @property
    def active_action(self) -> Action:
        return self._active

    def action_switch(self, label: str) -> bool:
        """Activate the action called *label*. Unknown labels are ignored."""
        action = self._actions.get(label)
        if action is None:
            logger.warning(f"Unknown action {label!r}")
            return False
        self._active = action
        action.reset(self.working_photo)
        return True

    @property
    def action_options(self) -> list[str]:
        return self._active.options

    @property
    def action_selected_options(self) -> list[str]:
        return self._active.selected

    def toggle_option(self, index: int) -> list[str]:
        """Toggle option *index* of the active action; returns the selection."""
        return list(self._active.toggle_option(index).selected)

    def commit(self) -> Path | None:
        """Apply the active action's selection to the working file.

        Returns the file's new path, or None if nothing was committed or the
        file on disk could not be renamed. A failed rename leaves the
        library in its new state.
        """
        photo = self.working_photo
        if photo is None or self._working is None:
            return None
        old_path = self._working
        if not self._active.commit(self._manager):
            return None
        new_path = self._rename_on_disk(old_path, photo)
        if new_path is not None:
            self._working = new_path
        return new_path

    # --- Tags ---

    @property
    def tags(self) -> list[str]:
        return self._manager.tags

    def add_tag(self, name: str) -> bool:
        return self._manager.add_tag(name)

    def delete_tag(self, name: str) -> dict[Path, Photo]:
        """Delete a tag everywhere and rename the affected files on disk.

        Returns {old path: photo} for every file the library renamed,
        whether or not the rename on disk succeeded.
        """
        tag = self._manager.get_tag(name)
        if tag is None:
            return {}
        carriers = {self._physical_path(p): p for p in tag.photos_with_tag()}
        self._manager.delete_tag(name)
        for old_path, photo in carriers.items():
            new_path = self._rename_on_disk(old_path, photo)
            if new_path is not None and self._working == old_path:
                self._working = new_path
        return carriers

    def set_tags(self, path: str | Path, tag_names: Iterable[str]) -> Path | None:
        """Give the file at *path* exactly *tag_names* and rename it."""
        path = Path(path)
        photo = self._photo_for(path)
        self._manager.set_photo_tag_set(photo.name, photo.directory, list(tag_names))
        new_path = self._rename_on_disk(path, photo)
        if new_path is not None and self._working == path:
            self._working = new_path
        return new_path

    def photo_for_file(self, path: str | Path) -> Photo:
        return self._photo_for(Path(path))

    # --- Queries ---

    def most_tagged_files(self) -> list[Path]:
        """Viewing images tied for the most tags, in registration order."""
        photos = [self._photo_for(p) for p in self._viewing]
        return [p.path for p in self._manager.most_tagged(photos)]

    def change_log_entries(self) -> list[ChangeLogEntry]:
        change_log = self._manager.change_log
        return change_log.entries() if change_log is not None else []

    # --- Private helpers ---

    def _rename_on_disk(self, old_path: Path, photo: Photo) -> Path | None:
        new_path = rename_photo_file(old_path, photo.name)
        if new_path is None:
            logger.warning(
                f"{old_path} is now named {photo.name} in the library "
                f"but could not be renamed on disk"
            )
            self._unrenamed[old_path] = photo
            return None
        self._unrenamed.pop(old_path, None)
        if old_path in self._viewing:
            self._viewing[self._viewing.index(old_path)] = new_path
        return new_path
