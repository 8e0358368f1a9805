"""
Photo Renamer - tag-driven image file renaming.

Tags attached to an image are encoded in its file name
(``base@tag1@tag2.ext``), and every name a file has held can be restored.
"""

__version__ = "0.1.0"

from .library.manager import Manager, ManagerEvent, EventKind
from .library.photo import Photo
from .library.tag import Tag
from .actions.tagging import TaggingAction
from .actions.reverting import RevertingAction
from .session import Session

__all__ = [
    'Manager',
    'ManagerEvent',
    'EventKind',
    'Photo',
    'Tag',
    'TaggingAction',
    'RevertingAction',
    'Session',
]
