"""User settings for the editor.

Settings live in a JSON file in the OS-appropriate config directory. Every
key is optional; missing or invalid values fall back to the defaults in
EditorConstants.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
    status_message_seconds: float = EditorConstants.STATUS_MESSAGE_SECONDS
    file_name_width: int = EditorConstants.FILE_NAME_WIDTH
    status_fg: tuple = field(default=EditorConstants.STATUS_FG_COLOR)
    status_bg: tuple = field(default=EditorConstants.STATUS_BG_COLOR)
    show_welcome: bool = True


def _is_color(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 3
        and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
    )


def validate_setting(key: str, value: Any) -> bool:
    """Check that a value has the right type and range for its key.

    Args:
        key: Setting key name.
        value: Value read from the settings file.

    Returns:
        True if the value can be used.
    """
    if key == 'status_message_seconds':
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    if key == 'file_name_width':
        return isinstance(value, int) and not isinstance(value, bool) and value >= 1
    if key in ('status_fg', 'status_bg'):
        return _is_color(value)
    if key == 'show_welcome':
        return isinstance(value, bool)
    return False


class SettingsLoader:
    """Reads EditorSettings from settings.json in the user's config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("linepad"))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _read_file(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EditorSettings:
        """Load settings, using the default for anything missing or invalid."""
        data = self._read_file()
        known = {f.name for f in fields(EditorSettings)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Unknown setting {key!r}, ignoring")
                continue
            if not validate_setting(key, value):
                logger.warning(f"Invalid value for setting {key!r}: {value!r}, using default")
                continue
            values[key] = tuple(value) if key in ('status_fg', 'status_bg') else value
        return EditorSettings(**values)


# Global instance
_settings: Optional[EditorSettings] = None


def get_settings() -> EditorSettings:
    """Get the settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = SettingsLoader().load()
    return _settings
