"""Reverting action: restore one of a photo's previous names."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from photo_renamer.actions.base import Action, ActionState
from photo_renamer.library.manager import Manager
from photo_renamer.library.naming import parse_tag_names

if TYPE_CHECKING:
    from photo_renamer.library.photo import Photo

logger = logging.getLogger(__name__)


class RevertingAction(Action):
    """Single-select over the photo's history.

    Committing re-applies the tags encoded in the chosen name, which makes
    the photo take that name again.
    """

    label = "Reverting"

    def _initial_state(self, photo: Photo) -> ActionState:
        # A previous name is never "applied", so nothing starts selected.
        return ActionState(tuple(photo.history), ())

    def _toggled(self, option: str) -> tuple[str, ...]:
        if self._state.selected == (option,):
            return ()
        return (option,)

    def commit(self, manager: Manager) -> bool:
        photo = self._photo
        if photo is None or len(self._state.selected) != 1:
            return False
        target = self._state.selected[0]
        tags = parse_tag_names(target)
        logger.debug(f"Reverting {photo.name} to {target}")
        manager.set_photo_tag_set(photo.name, photo.directory, tags)
        return True
