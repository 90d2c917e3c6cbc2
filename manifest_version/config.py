"""Configuration helpers for the manifest-version CLI."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CONFIG_ENV_VAR = "MANIFEST_VERSION_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "config.yaml"
USER_CONFIG_PATH = Path.home() / ".config" / "manifest-version" / DEFAULT_CONFIG_FILE

DEFAULT_CONFIG: Dict[str, Any] = {
    "search_path": {
        "entries": [],
        "include_sys_path": True,
    },
    "logging": {
        "level": "WARNING",
    },
}


def get_config_path() -> Path:
    """Resolve the config file path, honouring the environment override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        if path.suffix:
            return path
        return path / DEFAULT_CONFIG_FILE
    return USER_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, falling back to defaults."""
    data = _load_yaml(path or get_config_path())
    return _deep_merge_dicts(DEFAULT_CONFIG, data or {})


def search_path_entries(config: Dict[str, Any]) -> List[str]:
    """Return the extra search path entries listed in the configuration."""
    section = config.get("search_path", {})
    entries = section.get("entries") if isinstance(section, dict) else None
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise RuntimeError("search_path.entries must be a list of paths.")
    return [str(Path(str(entry)).expanduser()) for entry in entries]


def logging_level(config: Dict[str, Any]) -> str:
    """Return the configured log level name."""
    section = config.get("logging")
    if section is None:
        return DEFAULT_CONFIG["logging"]["level"]
    if not isinstance(section, dict):
        raise RuntimeError("logging must be a mapping.")
    level = section.get("level")
    if level is None:
        return DEFAULT_CONFIG["logging"]["level"]
    if not isinstance(level, str):
        raise RuntimeError("logging.level must be a level name such as WARNING.")
    return level


def _load_yaml(path: Path) -> Optional[Dict[str, Any]]:
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh) or {}
            if isinstance(loaded, dict):
                return loaded
            raise RuntimeError(f"Invalid configuration structure at {path}; expected a mapping.")
    except yaml.YAMLError as err:
        raise RuntimeError(f"Invalid configuration at {path}: {err}") from err


def _deep_merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries without mutating inputs."""
    result: Dict[str, Any] = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


__all__ = ["DEFAULT_CONFIG", "CONFIG_ENV_VAR", "get_config_path", "load_config", "logging_level", "search_path_entries"]
