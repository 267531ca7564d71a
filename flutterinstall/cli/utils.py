"""
Shared utilities for CLI commands.
"""

from pathlib import Path

from flutterinstall.config.settings import Settings, load_settings
from flutterinstall.core.platform import detect_architecture
from flutterinstall.core.tool_cache import ToolCache

DEFAULT_CONFIG_FILE = "flutterinstall.yaml"


def load_cli_settings(args) -> Settings:
    """
    Load settings for a CLI invocation.

    Uses --config when given, otherwise ./flutterinstall.yaml if present.

    Args:
        args: Parsed arguments with a config field

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the settings file is invalid
    """
    config_file = getattr(args, "config", None)
    if config_file is None:
        config_file = Path.cwd() / DEFAULT_CONFIG_FILE
    return load_settings(config_file)


def resolve_architecture(args) -> str:
    """Architecture from --arch, or the host's."""
    return getattr(args, "arch", None) or detect_architecture()


def create_tool_cache(settings: Settings) -> ToolCache:
    """Build a ToolCache honouring settings directory overrides."""
    return ToolCache(
        tools_dir=settings.tools_directory,
        temp_dir=settings.temp_directory,
        request_timeout=settings.request_timeout,
    )
