"""User settings for the editor.

Settings live in a JSON file in the OS-appropriate config directory. A
missing, unreadable or malformed file never stops the editor; the defaults
from EditorConstants are used instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


@dataclass
class Settings:
    """Editor options the user may override."""
    quit_times: int = EditorConstants.QUIT_TIMES


def default_settings_path() -> Path:
    return Path(platformdirs.user_config_dir("kite")) / SETTINGS_FILENAME


def validate_setting(key: str, value: Any) -> bool:
    """Return True if value is acceptable for key.

    Unknown keys are accepted (and ignored) for forward compatibility.
    """
    if key == 'quit_times':
        return isinstance(value, int) and not isinstance(value, bool) and value >= 1
    return True


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from path (default: the user config directory)."""
    settings_file = path or default_settings_path()
    settings = Settings()
    if not settings_file.exists():
        return settings

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data: Dict[str, Any] = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {settings_file}: {e}")
        return settings

    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return settings

    for key, value in data.items():
        if not hasattr(settings, key):
            continue
        if not validate_setting(key, value):
            logger.warning(f"Ignoring invalid value {value!r} for setting {key}")
            continue
        setattr(settings, key, value)
    return settings
