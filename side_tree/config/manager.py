from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative settings of the side tree (behaviour
options, key bindings, logging). It loads YAML files packaged with
*side_tree* and merges them with user overrides.

On Windows: ``%LOCALAPPDATA%\\SideTree\\config\\*.yml``
On Unix: ``~/.side_tree/*.yml``

``SIDE_TREE_CONFIG_DIR`` overrides the user directory on every platform.
"""

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("SIDE_TREE_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':  # Windows
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "SideTree" / "config"
        else:
            return Path.home() / "AppData" / "Local" / "SideTree" / "config"
    else:  # Unix-like systems
        return Path.home() / ".side_tree"


def _read_packaged(filename: str) -> str:
    return resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


def _ensure_user_configs_exist(user_config_dir: Path, default_filenames: Dict[str, str]) -> None:
    """Copy default config files to user directory if they don't exist."""
    try:
        user_config_dir.mkdir(parents=True, exist_ok=True)

        for key, filename in default_filenames.items():
            user_config_path = user_config_dir / filename

            if not user_config_path.exists():
                try:
                    user_config_path.write_text(_read_packaged(filename), encoding='utf-8')
                    logger.info("Created user config: %s", user_config_path)
                except (FileNotFoundError, OSError) as e:
                    logger.warning("Could not copy default config %s: %s", filename, e)

    except OSError as e:
        logger.error("Could not create user config directory %s: %s", user_config_dir, e)


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Forget the shared instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "side_tree": "side_tree.yml",
        "keymap": "keymap.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self.user_config_dir: Path = _get_user_config_dir()
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_side_tree_config(self) -> Dict[str, Any]:
        return self._data.get("side_tree", {})

    def get_keymap(self) -> Dict[str, Any]:
        return self._data.get("keymap", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        _ensure_user_configs_exist(self.user_config_dir, self._DEFAULT_FILENAMES)

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                packaged_data = yaml.safe_load(_read_packaged(filename)) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
                status = "missing"
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = self.user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))
