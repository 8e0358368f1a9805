"""Configuration manager for Photo Renamer."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG: dict[str, Any] = {
    "library": {
        "path": ".photo_renamer.db",
        "save_on_close": True,
    },
    "change_log": {
        "enabled": True,
        "path": "photo_renamer_changes.csv",
    },
    "file_scanning": {
        "supported_formats": [
            "png", "tif", "tiff", "jpg", "jpeg", "bmp", "gif",
        ],
        "ignore_hidden_files": True,
        "include_subdirectories": True,
        "verify_images": False,
    },
    "logging": {
        "level": "INFO",
        "log_to_file": False,
        "log_file": "photo_renamer.log",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class ConfigManager:
    """Load, save, and access YAML configuration with defaults."""

    def __init__(self, config_path: str | Path | None = None):
        self._path = Path(config_path) if config_path else None
        self._config: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if self._path and self._path.exists():
            self.load()

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def config(self) -> dict[str, Any]:
        return self._config

    def load(self, config_path: str | Path | None = None) -> None:
        """Load config from YAML file, merging with defaults."""
        path = Path(config_path) if config_path else self._path
        if path is None:
            raise ValueError("No config path specified")
        self._path = path
        with open(path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        self._config = _deep_merge(DEFAULT_CONFIG, user_config)

    def save(self, config_path: str | Path | None = None) -> None:
        """Save current config to YAML file."""
        path = Path(config_path) if config_path else self._path
        if path is None:
            raise ValueError("No config path specified")
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Get a config value using dotted notation (e.g. 'library.path')."""
        keys = dotted_key.split(".")
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, dotted_key: str, value: Any) -> None:
        """Set a config value using dotted notation."""
        keys = dotted_key.split(".")
        target = self._config
        for key in keys[:-1]:
            if key not in target or not isinstance(target[key], dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value


def setup_logging(config: ConfigManager, verbose: bool = False) -> None:
    """Configure the root logger from the ``logging`` config section."""
    level_name = "DEBUG" if verbose else str(config.get("logging.level", "INFO"))
    level = getattr(logging, level_name.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.get("logging.log_to_file", False):
        handlers.append(
            logging.FileHandler(config.get("logging.log_file", "photo_renamer.log"))
        )

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )
