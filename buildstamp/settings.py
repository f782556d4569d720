"""Persisted user defaults for buildstamp.

Defaults live in a JSON file in the user's config directory and are
overridden by command-line flags.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import BuildstampConstants
from .encoder import ArtifactEncoder

logger = logging.getLogger(__name__)


class SettingsKeys:
    """Constants for settings keys."""

    GIT_EXECUTABLE = "git_executable"
    FORMAT = "format"


class SettingsPersistence:
    """Loads and saves the user's default settings."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize settings persistence.

        Args:
            config_dir: Directory holding settings.json. Defaults to the
                platform's user config directory.
        """
        self._config_dir = config_dir or Path(
            platformdirs.user_config_dir(BuildstampConstants.APP_NAME)
        )
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Any]] = None

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def load(self) -> Dict[str, Any]:
        """Load the valid stored settings.

        Returns:
            Mapping of setting keys to values. Empty if the file is missing
            or can't be read. Invalid entries are dropped.
        """
        if self._settings_cache is not None:
            return dict(self._settings_cache)

        data: Dict[str, Any] = {}
        if self._settings_file.exists():
            try:
                with open(self._settings_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Could not load settings from {self._settings_file}: {e}")
                data = {}

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}

        valid = {}
        for key, value in data.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r}")

        self._settings_cache = valid
        return dict(valid)

    def save(self, settings: Dict[str, Any]) -> bool:
        """Merge settings into the stored ones and write them atomically.

        Returns:
            True if the save succeeded, False otherwise.
        """
        merged = self.load()
        merged.update({k: v for k, v in settings.items() if v is not None})

        temp_file = self._settings_file.with_suffix(BuildstampConstants.ATOMIC_SAVE_SUFFIX)
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(merged, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._settings_cache = merged
        return True

    def validate_setting(self, key: str, value: Any) -> bool:
        """Check a single setting value.

        Unknown keys are accepted so newer settings files keep working.
        """
        if key == SettingsKeys.GIT_EXECUTABLE:
            return isinstance(value, str) and bool(value)
        if key == SettingsKeys.FORMAT:
            return isinstance(value, str) and value in ArtifactEncoder.FORMATS
        return True

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
