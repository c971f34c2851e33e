"""
Utils Package

Settings store, fetch client and string helpers shared by the post downloader.
"""

from .persistent_settings import (
    PersistentSettings,
    get_settings_manager,
    get_persistent_setting,
    set_persistent_setting
)

__all__ = [
    'PersistentSettings',
    'get_settings_manager',
    'get_persistent_setting',
    'set_persistent_setting'
]
