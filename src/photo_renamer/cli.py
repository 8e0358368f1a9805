"""Command line interface for Photo Renamer."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from pathlib import Path

import yaml

from photo_renamer.config.config import ConfigManager, setup_logging
from photo_renamer.session import Session

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-renamer",
        description="Tag image files by renaming them, and revert to old names",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config YAML file",
    )
    parser.add_argument(
        "--library", type=str, default=None,
        help="Library database file (overrides library.path)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("scan", help="List the images under a directory")
    p.add_argument("directory")

    sub.add_parser("tags", help="List known tags and how many photos carry each")

    p = sub.add_parser("add-tag", help="Add tags to the vocabulary")
    p.add_argument("names", nargs="+")

    p = sub.add_parser(
        "delete-tag", help="Delete tags everywhere, renaming affected files",
    )
    p.add_argument("names", nargs="+")

    p = sub.add_parser("tag", help="Set the tags of a file (renames it)")
    p.add_argument("file")
    p.add_argument("tags", nargs="*")

    p = sub.add_parser("history", help="List the previous names of a file")
    p.add_argument("file")

    p = sub.add_parser("revert", help="Rename a file back to a previous name")
    p.add_argument("file")
    p.add_argument("index", type=int, help="Index shown by 'history'")

    p = sub.add_parser("most-tagged", help="Show the most tagged images")
    p.add_argument("directory")

    sub.add_parser("log", help="Show every rename made so far")

    p = sub.add_parser(
        "init-config", help="Write the effective configuration to a YAML file",
    )
    p.add_argument("path")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _load_config(args: argparse.Namespace) -> ConfigManager:
    config = ConfigManager()
    if args.config:
        config.load(args.config)
    if args.library:
        config.set("library.path", args.library)
    return config


def _cmd_init_config(config: ConfigManager, args: argparse.Namespace) -> int:
    path = Path(args.path)
    if path.exists():
        print(f"Error: {path} already exists")
        return 1
    config.save(path)
    print(path)
    return 0


def _cmd_scan(session: Session, args: argparse.Namespace) -> int:
    for path in session.scan(args.directory):
        print(path)
    return 0


def _cmd_tags(session: Session, args: argparse.Namespace) -> int:
    for tag in session.manager.tag_instances:
        print(f"{tag.name}\t{tag.photo_count}")
    return 0


def _cmd_add_tag(session: Session, args: argparse.Namespace) -> int:
    for name in args.names:
        if not session.add_tag(name):
            print(f"Tag already exists: {name}")
    return 0


def _cmd_delete_tag(session: Session, args: argparse.Namespace) -> int:
    for name in args.names:
        renamed = session.delete_tag(name)
        for old_path, photo in renamed.items():
            print(f"{old_path} -> {photo.name}")
    return 0


def _open_file(session: Session, file: str) -> Path:
    path = Path(file).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    session.set_viewing_images([path])
    if session.set_working_file(path) is None:
        raise ValueError(f"Not an image file: {path}")
    return path


def _cmd_tag(session: Session, args: argparse.Namespace) -> int:
    path = _open_file(session, args.file)
    new_path = session.set_tags(path, args.tags)
    if new_path is None:
        return 1
    print(new_path)
    return 0


def _cmd_history(session: Session, args: argparse.Namespace) -> int:
    _open_file(session, args.file)
    session.action_switch("Reverting")
    for index, name in enumerate(session.action_options):
        print(f"{index}\t{name}")
    return 0


def _cmd_revert(session: Session, args: argparse.Namespace) -> int:
    _open_file(session, args.file)
    session.action_switch("Reverting")
    session.toggle_option(args.index)
    new_path = session.commit()
    if new_path is None:
        return 1
    print(new_path)
    return 0


def _cmd_most_tagged(session: Session, args: argparse.Namespace) -> int:
    session.set_viewing_images(session.scan(args.directory))
    for path in session.most_tagged_files():
        print(path)
    return 0


def _cmd_log(session: Session, args: argparse.Namespace) -> int:
    entries = session.change_log_entries()
    if not entries:
        print("No renames logged yet")
    for entry in entries:
        print(entry)
    return 0


COMMANDS = {
    "scan": _cmd_scan,
    "tags": _cmd_tags,
    "add-tag": _cmd_add_tag,
    "delete-tag": _cmd_delete_tag,
    "tag": _cmd_tag,
    "history": _cmd_history,
    "revert": _cmd_revert,
    "most-tagged": _cmd_most_tagged,
    "log": _cmd_log,
}


def main(argv: list[str] | None = None) -> int:
    """Run a single command. Returns the process exit code."""
    args = parse_args(argv)
    try:
        config = _load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 1
    setup_logging(config, args.verbose)

    if args.command == "init-config":
        try:
            return _cmd_init_config(config, args)
        except OSError as e:
            print(f"Error: {e}")
            return 1

    try:
        with Session.from_config(config) as session:
            return COMMANDS[args.command](session, args)
    except (OSError, ValueError, IndexError, sqlite3.Error) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        return 1
