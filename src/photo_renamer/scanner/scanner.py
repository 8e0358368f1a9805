"""Directory scanner for finding image files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from photo_renamer.config.config import ConfigManager

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = {"png", "tif", "tiff", "jpg", "jpeg", "bmp", "gif"}


class ImageScanner:
    """Find image files by extension, optionally checking they really open."""

    def __init__(self, config: ConfigManager | None = None):
        self._config = config
        self._supported_formats = self._get_supported_formats()
        self._ignore_hidden = True
        self._recursive = True
        self._verify = False
        if config:
            self._ignore_hidden = config.get(
                "file_scanning.ignore_hidden_files", True
            )
            self._recursive = config.get(
                "file_scanning.include_subdirectories", True
            )
            self._verify = config.get("file_scanning.verify_images", False)

    @property
    def supported_formats(self) -> set[str]:
        return set(self._supported_formats)

    def is_image(self, path: str | Path) -> bool:
        """True if *path* has a supported image extension (any case)."""
        ext = Path(path).suffix.lower().lstrip(".")
        return ext in self._supported_formats

    def find_images(self, directory: str | Path) -> list[Path]:
        """Return every image file under *directory*.

        Raises NotADirectoryError if *directory* is not a directory. The
        returned order is sorted but callers should not depend on it.
        """
        directory = Path(directory).resolve()
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        if self._recursive:
            walker = os.walk(directory)
        else:
            walker = [(str(directory), [], os.listdir(directory))]

        image_files: list[Path] = []
        for root_str, dirs, files in walker:
            root = Path(root_str)

            if self._ignore_hidden:
                dirs[:] = [d for d in dirs if not d.startswith(".")]

            for filename in sorted(files):
                if self._ignore_hidden and filename.startswith("."):
                    continue
                filepath = root / filename
                if not filepath.is_file() or not self.is_image(filepath):
                    continue
                if self._verify and not self._verify_image(filepath):
                    continue
                image_files.append(filepath)

        logger.debug(f"Found {len(image_files)} image(s) in {directory}")
        return image_files

    def _verify_image(self, filepath: Path) -> bool:
        try:
            with Image.open(filepath) as img:
                img.verify()
            return True
        except (OSError, UnidentifiedImageError, SyntaxError) as e:
            logger.warning(f"Skipping unreadable image {filepath}: {e}")
            return False

    def _get_supported_formats(self) -> set[str]:
        if self._config:
            formats = self._config.get("file_scanning.supported_formats", [])
            if formats:
                return set(f.lower() for f in formats)
        return set(DEFAULT_FORMATS)
