"""
Process-wide settings for flutterinstall.

Settings are read-only once loaded. Defaults cover the public Flutter
release infrastructure; an optional YAML file can override them, e.g.
to point at a mirror:

    releases_url: https://mirror.example.com/flutter/releases_{arch}.json
    request_timeout: 60
    tools_directory: /opt/hostedtoolcache
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from flutterinstall.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RELEASES_URL = (
    "https://storage.googleapis.com/flutter_infra/releases/releases_{arch}.json"
)


@dataclass(frozen=True)
class Settings:
    """
    Read-only settings shared by every component of a run.

    Attributes:
        tool_name: Tool name used as the first part of the cache key
        exe_relative_path: Directory holding the flutter executable, relative
            to the cached install
        tool_path_variable: Name of the output variable published on success
        releases_url: Manifest URL template with an ``{arch}`` placeholder
        request_timeout: HTTP timeout in seconds
        tools_directory: Tool cache root override
        temp_directory: Download/extraction scratch directory override
    """

    tool_name: str = "Flutter"
    exe_relative_path: str = "flutter/bin"
    tool_path_variable: str = "FlutterToolPath"
    releases_url: str = DEFAULT_RELEASES_URL
    request_timeout: int = 30
    tools_directory: Optional[Path] = None
    temp_directory: Optional[Path] = None


DEFAULT_SETTINGS = Settings()

# Keys a settings file is allowed to override
_OVERRIDABLE = {
    "releases_url": str,
    "request_timeout": int,
    "tools_directory": str,
    "temp_directory": str,
}


def _coerce(key: str, value: Any) -> Any:
    """Validate one override value and convert it to its field type."""
    expected = _OVERRIDABLE[key]

    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ConfigurationError(
            f"Setting '{key}' must be of type {expected.__name__}, "
            f"got {type(value).__name__}"
        )

    if key in ("tools_directory", "temp_directory"):
        return Path(value).expanduser()
    if key == "request_timeout" and value <= 0:
        raise ConfigurationError("Setting 'request_timeout' must be positive")
    if key == "releases_url" and "{arch}" not in value:
        raise ConfigurationError(
            "Setting 'releases_url' must contain an '{arch}' placeholder"
        )
    return value


def settings_from_dict(data: Dict[str, Any], base: Settings = DEFAULT_SETTINGS) -> Settings:
    """
    Build Settings from a mapping of overrides.

    Unknown keys are ignored with a warning.

    Args:
        data: Override mapping (typically parsed YAML)
        base: Settings to apply overrides on top of

    Returns:
        New Settings instance

    Raises:
        ConfigurationError: If a value has the wrong type or is invalid
    """
    overrides = {}
    for key, value in data.items():
        if key not in _OVERRIDABLE:
            logger.warning(f"Ignoring unknown setting: {key}")
            continue
        if value is None:
            continue
        overrides[key] = _coerce(key, value)

    return replace(base, **overrides)


def load_settings(config_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings, applying overrides from an optional YAML file.

    Args:
        config_file: Path to YAML settings file. None or a missing file
            yields the defaults.

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping

    Example:
        >>> settings = load_settings("flutterinstall.yaml")
        >>> settings.tool_name
        'Flutter'
    """
    if config_file is None:
        return DEFAULT_SETTINGS

    config_file = Path(config_file)
    if not config_file.exists():
        logger.debug(f"Settings file not found (optional): {config_file}")
        return DEFAULT_SETTINGS

    logger.debug(f"Loading settings from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file {config_file} must contain a mapping at top level"
        )

    return settings_from_dict(data)


__all__ = [
    "DEFAULT_RELEASES_URL",
    "DEFAULT_SETTINGS",
    "Settings",
    "settings_from_dict",
    "load_settings",
]
