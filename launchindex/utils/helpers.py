"""
Helper utilities for the launch index.

Provides settings loading: a TOML file deep-merged over built-in defaults.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "launchindex" / "settings.toml"


def default_settings() -> Dict[str, Any]:
    """
    Built-in settings.

    Example settings structure:
        {
            "search": {
                "name_weight": 2.0,
                "phonetic_weight": 1.5,
                "initials_weight": 1.0
            },
            "history": {
                "max_items": 12,
                "min_uses": 1
            },
            "coordinator": {
                "ready_timeout": 5.0
            },
            "storage": {
                "db_path": "",
                "async_writes": True
            }
        }
    """
    return {
        "search": {
            "name_weight": 2.0,
            "phonetic_weight": 1.5,
            "initials_weight": 1.0,
        },
        "history": {
            "max_items": 12,
            "min_uses": 1,
        },
        "coordinator": {
            "ready_timeout": 5.0,
        },
        "storage": {
            "db_path": "",
            "async_writes": True,
        },
    }


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from a TOML file.

    Args:
        settings_path: File to read; defaults to
                       ~/.config/launchindex/settings.toml

    Returns:
        Dictionary containing settings with defaults applied
    """
    defaults = default_settings()
    settings_path = Path(settings_path) if settings_path else DEFAULT_SETTINGS_PATH

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}. Using defaults")
        return defaults

    return _deep_merge(defaults, loaded)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def search_weights(settings: Dict[str, Any]) -> Dict[str, float]:
    """Map the [search] section onto fuzzy index field weights."""
    section = settings.get("search", {})
    return {
        "name": float(section.get("name_weight", 2.0)),
        "phonetic_key": float(section.get("phonetic_weight", 1.5)),
        "phonetic_initials": float(section.get("initials_weight", 1.0)),
    }
