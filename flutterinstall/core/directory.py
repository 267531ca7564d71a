"""
Directory resolution for flutterinstall.

Build agents advertise where tools should be cached and where scratch files
may go through environment variables. This module resolves both locations,
falling back to a per-user directory when running outside an agent.

Directory Structure:
    Tool cache (AGENT_TOOLSDIRECTORY, RUNNER_TOOL_CACHE or ~/.flutterinstall/tools):
        - <tool>/<version>/<arch>/   : Cached install
        - <tool>/<version>/<arch>.complete : Marker written after a full copy
        - <tool>/.lock               : Held while writing an entry

    Temp (AGENT_TEMPDIRECTORY, RUNNER_TEMP or ~/.flutterinstall/temp):
        - <uuid>/<archive>           : Downloaded archives
        - <uuid>/                    : Extracted archives
"""

import os
from pathlib import Path
from typing import Optional

TOOLS_DIRECTORY_ENV_VARS = ("AGENT_TOOLSDIRECTORY", "RUNNER_TOOL_CACHE")
TEMP_DIRECTORY_ENV_VARS = ("AGENT_TEMPDIRECTORY", "RUNNER_TEMP")


def get_user_data_dir() -> Path:
    """
    Get the per-user flutterinstall directory.

    Returns:
        Path: ~/.flutterinstall on Linux/macOS, %USERPROFILE%\\.flutterinstall
        on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if user_profile:
            return Path(user_profile) / ".flutterinstall"
    return Path.home() / ".flutterinstall"


def _from_environment(names) -> Optional[Path]:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return Path(value)
    return None


def get_tools_dir(override: Optional[Path] = None) -> Path:
    """
    Get the tool cache root.

    Args:
        override: Explicit location, takes precedence over the environment

    Returns:
        Path to the tool cache root (not created)
    """
    if override is not None:
        return Path(override)
    return _from_environment(TOOLS_DIRECTORY_ENV_VARS) or (
        get_user_data_dir() / "tools"
    )


def get_temp_dir(override: Optional[Path] = None) -> Path:
    """
    Get the scratch directory used for downloads and extraction.

    Args:
        override: Explicit location, takes precedence over the environment

    Returns:
        Path to the scratch directory (not created)
    """
    if override is not None:
        return Path(override)
    return _from_environment(TEMP_DIRECTORY_ENV_VARS) or (get_user_data_dir() / "temp")


__all__ = [
    "TOOLS_DIRECTORY_ENV_VARS",
    "TEMP_DIRECTORY_ENV_VARS",
    "get_user_data_dir",
    "get_tools_dir",
    "get_temp_dir",
]
