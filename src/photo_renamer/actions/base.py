"""Common behaviour for the tagging and reverting actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from photo_renamer.library.manager import Manager, ManagerEvent

if TYPE_CHECKING:
    from photo_renamer.library.photo import Photo


@dataclass(frozen=True)
class ActionState:
    """Options offered for the working photo and which of them are selected."""

    options: tuple[str, ...] = ()
    selected: tuple[str, ...] = ()


class Action:
    """Projects the Manager's state into a selectable option list.

    An action works on one photo at a time. Its options are always
    recomputed from the Manager and the photo; the only state it keeps is
    the working photo and the current selection. Every Manager
    notification resets the action for its working photo, so a commit
    never leaves a selection behind.
    """

    label = ""

    def __init__(self, manager: Manager | None = None):
        self._manager: Manager | None = None
        self._photo: Photo | None = None
        self._state = ActionState()
        if manager is not None:
            self.attach(manager)

    # --- Manager subscription ---

    def attach(self, manager: Manager) -> None:
        self.detach()
        self._manager = manager
        manager.subscribe(self.on_manager_changed)

    def detach(self) -> None:
        if self._manager is not None:
            self._manager.unsubscribe(self.on_manager_changed)
            self._manager = None

    def on_manager_changed(self, event: ManagerEvent) -> None:
        self.reset(self._photo)

    # --- State ---

    @property
    def working_photo(self) -> Photo | None:
        return self._photo

    @property
    def state(self) -> ActionState:
        return self._state

    @property
    def options(self) -> list[str]:
        return list(self._state.options)

    @property
    def selected(self) -> list[str]:
        return list(self._state.selected)

    def reset(self, photo: Photo | None) -> ActionState:
        """Switch to *photo* (or to no photo) and recompute everything."""
        self._photo = photo
        if photo is None:
            self._state = ActionState()
        else:
            self._state = self._initial_state(photo)
        return self._state

    def toggle_option(self, index: int) -> ActionState:
        """Flip the selection of the option at *index*.

        Raises IndexError if there is no such option; nothing changes then.
        """
        options = self._state.options
        if not 0 <= index < len(options):
            raise IndexError(f"No option at index {index}")
        self._state = ActionState(options, self._toggled(options[index]))
        return self._state

    def commit(self, manager: Manager) -> bool:
        """Apply the selection through *manager*. Returns False if skipped."""
        raise NotImplementedError

    # --- Subclass hooks ---

    def _initial_state(self, photo: Photo) -> ActionState:
        raise NotImplementedError

    def _toggled(self, option: str) -> tuple[str, ...]:
        raise NotImplementedError
