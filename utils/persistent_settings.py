"""
Persistent Settings Manager

Description: Manages persistent settings for the post downloader across runs
Author: Eric Hiss (GitHub: EricRollei)
Contact: eric@historic.camera, eric@rollei.us
License: Dual License (Non-Commercial and Commercial Use)
Copyright (c) 2025 Eric Hiss. All rights reserved.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Optional, Any, Dict

logger = logging.getLogger("post-downloader")

DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "run_options": {
        "flatten": False,
        "generate_links": False,
        "generate_log": False,
        "skip_duplicates": True,
        "skip_download": False,
    },
    "resolvers": {
        "gofile_token": "",
        "gofile_website_token": "12345",
        "pornhub_attempts": 20,
        "pornhub_delay": 1.0,
        "instagram_page_delay": 3.0,
        "image_extensions": ["jpg", "jpeg", "png", "gif", "gifv", "webp", "jpe", "svg", "tif", "tiff", "jif"],
        "max_concurrent_transfers": 0,
        "request_timeout": 60,
    },
    "naming": {
        "invalid_char_substitute": "-",
    },
}


class PersistentSettings:
    """
    Manages persistent settings for the post downloader.
    Settings are stored in a JSON file and merged over DEFAULT_SETTINGS,
    so a partial file never hides a default.
    """

    _instance = None
    _settings: Dict[str, Any] = {}
    _settings_file: Path = None

    def __new__(cls, settings_file: Optional[Path] = None):
        """Singleton pattern unless an explicit file is requested."""
        if settings_file is not None:
            instance = super().__new__(cls)
            instance._initialized = False
            return instance
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, settings_file: Optional[Path] = None):
        """Initialize the settings manager."""
        if self._initialized:
            return

        self._settings_file = Path(settings_file) if settings_file else \
            Path(__file__).parent.parent / "configs" / "post_downloader_settings.json"
        self._settings = self._load_settings()
        self._initialized = True
        logger.debug("PersistentSettings initialized from: %s", self._settings_file)

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from the JSON file, falling back to the defaults."""
        default_settings = copy.deepcopy(DEFAULT_SETTINGS)

        try:
            if self._settings_file.exists():
                with open(self._settings_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                # Merge with defaults to ensure all keys exist
                for key in default_settings:
                    if key not in loaded or not isinstance(loaded[key], dict):
                        loaded[key] = default_settings[key]
                    else:
                        for subkey in default_settings[key]:
                            if subkey not in loaded[key]:
                                loaded[key][subkey] = default_settings[key][subkey]
                return loaded
            return default_settings
        except (OSError, ValueError) as e:
            logger.warning("Error loading persistent settings from %s: %s", self._settings_file, e)
            return default_settings

    def _save_settings(self) -> bool:
        """Save current settings to the JSON file."""
        try:
            self._settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_file, 'w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=4)
            return True
        except OSError as e:
            logger.error("Error saving persistent settings: %s", e)
            return False

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a setting value for a section.

        Args:
            section: The settings section ('run_options', 'resolvers', 'naming')
            key: The setting key to retrieve
            default: Default value if the setting is not found

        Returns:
            The setting value or default
        """
        value = self._settings.get(section, {}).get(key)
        return default if value is None else value

    def set(self, section: str, key: str, value: Any) -> bool:
        """
        Set a setting value for a section and persist it.

        Returns:
            True if successful, False otherwise
        """
        self._settings.setdefault(section, {})[key] = value
        return self._save_settings()

    def get_all(self, section: str) -> Dict[str, Any]:
        """Get all settings for a section."""
        return dict(self._settings.get(section, {}))

    def reload(self) -> None:
        """Reload settings from file (useful if file was edited externally)."""
        self._settings = self._load_settings()


# Global instance for easy access
_settings_manager: Optional[PersistentSettings] = None


def get_settings_manager() -> PersistentSettings:
    """Get the global settings manager instance."""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = PersistentSettings()
    return _settings_manager


def get_persistent_setting(section: str, key: str, default: Any = None) -> Any:
    """Convenience function to get a persistent setting."""
    return get_settings_manager().get(section, key, default)


def set_persistent_setting(section: str, key: str, value: Any) -> bool:
    """Convenience function to set a persistent setting."""
    return get_settings_manager().set(section, key, value)
