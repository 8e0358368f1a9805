"""Renaming image files on disk to match their photo's derived name."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def rename_photo_file(old_path: str | Path, new_name: str) -> Path | None:
    """Rename *old_path* to *new_name* in the same directory.

    Makes a single attempt and never overwrites an existing file. Returns
    the new path, or None if the file could not be renamed.
    """
    old_path = Path(old_path)
    new_path = old_path.with_name(new_name)
    if new_path == old_path:
        return new_path
    if not old_path.is_file():
        logger.error(f"Cannot rename missing file {old_path}")
        return None
    if new_path.exists():
        logger.error(f"Cannot rename {old_path}: {new_path} already exists")
        return None
    try:
        os.rename(old_path, new_path)
    except OSError as e:
        logger.error(f"Failed to rename {old_path} to {new_name}: {e}")
        return None
    logger.debug(f"Renamed {old_path.name} -> {new_name}")
    return new_path
