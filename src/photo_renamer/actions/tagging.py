"""Tagging action: choose any subset of the vocabulary for a photo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from photo_renamer.actions.base import Action, ActionState
from photo_renamer.library.manager import Manager

if TYPE_CHECKING:
    from photo_renamer.library.photo import Photo

logger = logging.getLogger(__name__)


class TaggingAction(Action):
    """Multi-select over the vocabulary; commits the selection as the tag set."""

    label = "Tagging"

    def _vocabulary(self) -> list[str]:
        return self._manager.tags if self._manager is not None else []

    def _initial_state(self, photo: Photo) -> ActionState:
        options = tuple(self._vocabulary())
        selected = tuple(t for t in options if photo.has_tag(t))
        return ActionState(options, selected)

    def _toggled(self, option: str) -> tuple[str, ...]:
        chosen = set(self._state.selected) ^ {option}
        # Selection is always kept in vocabulary order.
        return tuple(t for t in self._state.options if t in chosen)

    def commit(self, manager: Manager) -> bool:
        photo = self._photo
        if photo is None:
            return False
        tags = [t for t in manager.tags if t in self._state.selected]
        logger.debug(f"Tagging {photo.name} with {tags}")
        manager.set_photo_tag_set(photo.name, photo.directory, tags)
        return True
