"""User configuration for the texit editor.

Settings are read from a JSON file in the OS-appropriate config directory
(``config.json`` under ``platformdirs.user_config_dir("texit")``). A missing
or broken file never prevents the editor from starting: every value that
cannot be used falls back to its default from ``EditorConstants``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TEXIT_CONFIG"


@dataclass
class EditorSettings:
    """Tunable editor settings."""
    tab_stop: int = EditorConstants.TAB_STOP
    message_timeout: float = EditorConstants.MESSAGE_TIMEOUT
    escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT


def default_config_path() -> Path:
    """Return the config file path, honouring the ``TEXIT_CONFIG`` override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path(platformdirs.user_config_dir("texit")) / "config.json"


def validate_setting(key: str, value: Any) -> bool:
    """Check a single setting value.

    Args:
        key: Setting name.
        value: Value read from the config file.

    Returns:
        True if the value can be used.
    """
    if isinstance(value, bool):
        return False
    if key == 'tab_stop':
        return isinstance(value, int) and 1 <= value <= 16
    if key in ('message_timeout', 'escape_timeout'):
        return isinstance(value, (int, float)) and value > 0
    return False


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return {}
    return data


def load_settings(path: Optional[Path] = None) -> EditorSettings:
    """Load editor settings.

    Args:
        path: Explicit config file. Defaults to ``default_config_path()``.

    Returns:
        EditorSettings with defaults for anything missing or invalid.
    """
    config_path = Path(path) if path is not None else default_config_path()
    data = _read_config_file(config_path)
    settings = EditorSettings()
    known = {f.name for f in fields(EditorSettings)}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Unknown setting {key!r} in {config_path}, ignoring")
            continue
        if not validate_setting(key, value):
            logger.warning(f"Invalid value {value!r} for {key!r}, using default")
            continue
        setattr(settings, key, value)
    logger.debug(f"Loaded settings {settings} from {config_path}")
    return settings
