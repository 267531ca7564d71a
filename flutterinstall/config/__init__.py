"""
Settings for flutterinstall.
"""

from .settings import (
    DEFAULT_RELEASES_URL,
    DEFAULT_SETTINGS,
    Settings,
    settings_from_dict,
    load_settings,
)

__all__ = [
    "DEFAULT_RELEASES_URL",
    "DEFAULT_SETTINGS",
    "Settings",
    "settings_from_dict",
    "load_settings",
]
