"""
Helper utilities for the Amoeba launcher.

Provides common functions used at startup:
- Settings loading
- User agent construction for outgoing HTTP requests
"""

from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

APP_NAME = "amoeba"
APP_VERSION = "0.1.0"
APP_AUTHOR = "amoeba developers"

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "data" / "settings.toml"


def default_settings() -> Dict[str, Any]:
    """Built-in settings, used for any key the settings file leaves out."""
    return {
        "launcher": {
            "query_timeout_ms": 2000,
            "log_level": "INFO",
        },
        "app": {
            "name": APP_NAME,
            "author": APP_AUTHOR,
        },
        "wikipedia": {
            "base_url": "https://en.wikipedia.org",
            "result_limit": 5,
            "max_attempts": 3,
            "rate_limit_backoff_ms": 1000,
            "throttle_ms": 500,
            "request_timeout_ms": 5000,
        },
    }


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        path: Settings file to read, defaults to data/settings.toml

    Returns:
        Dictionary containing settings with defaults applied

    Example settings structure:
        {
            "launcher": {
                "query_timeout_ms": 2000,
                "log_level": "INFO"
            },
            "wikipedia": {
                "max_attempts": 3,
                "throttle_ms": 500
            }
        }
    """
    defaults = default_settings()
    settings_path = path or DEFAULT_SETTINGS_PATH

    if not settings_path.exists():
        logger.info(f"Settings file not found at {settings_path}, using defaults")
        return defaults

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}, using defaults")
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


def build_user_agent(name: str, version: str, author: str) -> str:
    """Format a User-Agent header value, e.g. 'amoeba/0.1.0 (someone)'."""
    return f"{name}/{version} ({author})"
