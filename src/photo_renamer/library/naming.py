"""Derived file name encoding.

A tagged file name has the form::

    <base>@<tag1>@<tag2>...@<tagN>.<ext>

Tags appear in the order they were applied to the photo. The extension is
kept exactly as it was on the original file.
"""

from __future__ import annotations

from typing import Iterable

TAG_SEPARATOR = "@"

_FORBIDDEN_TAG_CHARS = (TAG_SEPARATOR, "/", "\\")


class InvalidTagNameError(ValueError):
    """Raised when a tag name cannot be encoded in a file name."""


def validate_tag_name(name: str) -> str:
    """Return *name* unchanged if it is usable as a tag, else raise."""
    if not name or name != name.strip():
        raise InvalidTagNameError(f"Invalid tag name: {name!r}")
    for char in _FORBIDDEN_TAG_CHARS:
        if char in name:
            raise InvalidTagNameError(
                f"Tag name {name!r} may not contain {char!r}"
            )
    return name


def split_extension(name: str) -> tuple[str, str]:
    """Split a file name at its last dot. Returns (stem, ext)."""
    stem, dot, ext = name.rpartition(".")
    if not dot:
        return name, ""
    return stem, ext


def render_name(base: str, tag_names: Iterable[str], extension: str) -> str:
    """Build the file name for a base name, ordered tags and extension."""
    name = base + "".join(TAG_SEPARATOR + t for t in tag_names)
    if extension:
        name += "." + extension
    return name


def _encoded_tags(name: str) -> tuple[str, list[str]] | None:
    """Return (base, tags) if *name* is a well formed tagged name."""
    stem, ext = split_extension(name)
    if not ext:
        return None
    base, *tags = stem.split(TAG_SEPARATOR)
    if not base or any(not t for t in tags):
        return None
    if len(set(tags)) != len(tags):
        return None
    return base, tags


def parse_tag_names(name: str) -> list[str]:
    """Recover the ordered tag list encoded in a file name.

    Names that don't parse as ``<base>(@tag)*.<ext>`` carry zero tags.
    """
    parsed = _encoded_tags(name)
    if parsed is None:
        return []
    return parsed[1]


def split_name(name: str) -> tuple[str, list[str], str]:
    """Split a file name into (base, tags, ext) for a newly seen file.

    The encoded tags are only honoured when re-rendering them reproduces
    *name* exactly and every tag is a valid tag name; otherwise the whole
    stem is treated as the base.
    """
    stem, ext = split_extension(name)
    parsed = _encoded_tags(name)
    if parsed is None:
        return stem, [], ext
    base, tags = parsed
    try:
        for tag in tags:
            validate_tag_name(tag)
    except InvalidTagNameError:
        return stem, [], ext
    if render_name(base, tags, ext) != name:
        return stem, [], ext
    return base, tags, ext
