"""
Flutter SDK resolution and installation.
"""

from .releases import (
    LATEST,
    InstallRequest,
    Release,
    ReleaseManifest,
    SdkInfo,
    manifest_url,
    fetch_manifest,
    resolve_sdk,
)

from .installer import (
    FlutterInstaller,
    INSTALLED_MESSAGE,
    TOOL_PATH_NOT_FOUND_MESSAGE,
)

__all__ = [
    "LATEST",
    "InstallRequest",
    "Release",
    "ReleaseManifest",
    "SdkInfo",
    "manifest_url",
    "fetch_manifest",
    "resolve_sdk",
    "FlutterInstaller",
    "INSTALLED_MESSAGE",
    "TOOL_PATH_NOT_FOUND_MESSAGE",
]
