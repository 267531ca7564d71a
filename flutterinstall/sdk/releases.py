"""
Flutter release resolution.

Flutter publishes one manifest per host OS listing every release on every
channel:

    {
      "base_url": "https://storage.googleapis.com/flutter_infra_release/releases",
      "current_release": {"stable": "<hash>", "beta": "<hash>"},
      "releases": [
        {"hash": "<hash>", "channel": "stable", "version": "3.13.0",
         "archive": "stable/linux/flutter_linux_3.13.0-stable.tar.xz"},
        ...
      ]
    }

This module turns a (channel, architecture, version selector) request into
the cache version key and archive URL of one release.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from flutterinstall.config.settings import Settings, DEFAULT_SETTINGS
from flutterinstall.core.download import get_json
from flutterinstall.core.exceptions import (
    ConfigurationError,
    ManifestError,
    ReleaseNotFoundError,
)

logger = logging.getLogger(__name__)

LATEST = "latest"


@dataclass(frozen=True)
class InstallRequest:
    """What to install: a channel, a host architecture and a version selector."""

    channel: str
    architecture: str
    version: str

    def __post_init__(self):
        if not self.channel:
            raise ConfigurationError("Channel cannot be empty")
        if not self.version:
            raise ConfigurationError("Version cannot be empty")


@dataclass(frozen=True)
class Release:
    """One entry of the release manifest."""

    hash: str
    version: str
    archive: str
    channel: str = ""
    release_date: str = ""
    sha256: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Release":
        """
        Build a Release from a manifest entry.

        Raises:
            ManifestError: If hash, version or archive is missing
        """
        if not isinstance(data, dict):
            raise ManifestError(f"Release entry must be an object, got {type(data).__name__}")

        missing = [key for key in ("hash", "version", "archive") if key not in data]
        if missing:
            raise ManifestError(
                f"Release entry is missing required fields: {', '.join(missing)}"
            )

        return cls(
            hash=str(data["hash"]),
            version=str(data["version"]),
            archive=str(data["archive"]),
            channel=str(data.get("channel", "")),
            release_date=str(data.get("release_date", "")),
            sha256=str(data.get("sha256", "")),
        )


@dataclass(frozen=True)
class ReleaseManifest:
    """Parsed release manifest for one architecture."""

    base_url: str
    current_release: Dict[str, str] = field(default_factory=dict)
    releases: List[Release] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ReleaseManifest":
        """
        Parse a decoded manifest document.

        Raises:
            ManifestError: If the document does not have the manifest shape
        """
        if not isinstance(data, dict):
            raise ManifestError("Release manifest must be a JSON object")

        missing = [
            key for key in ("base_url", "current_release", "releases") if key not in data
        ]
        if missing:
            raise ManifestError(
                f"Release manifest is missing required fields: {', '.join(missing)}"
            )

        if not isinstance(data["current_release"], dict):
            raise ManifestError("'current_release' must be an object")
        if not isinstance(data["releases"], list):
            raise ManifestError("'releases' must be a list")

        return cls(
            base_url=str(data["base_url"]),
            current_release={str(k): str(v) for k, v in data["current_release"].items()},
            releases=[Release.from_dict(entry) for entry in data["releases"]],
        )

    def find_release(self, channel: str, version: str) -> Optional[Release]:
        """
        Select the release matching a version selector.

        For "latest", the release whose hash is the channel's current release.
        Otherwise the first release whose version equals the selector, where a
        single leading "v" on either side is ignored ("2.10.0" matches
        "v2.10.0"); the channel plays no part in that match.

        Args:
            channel: Release channel (e.g., "stable")
            version: "latest" or a literal version

        Returns:
            The first matching release, or None
        """
        if version == LATEST:
            current_hash = self.current_release.get(channel)
            if current_hash is None:
                logger.debug(f"Channel '{channel}' has no current release")
                return None
            return next((r for r in self.releases if r.hash == current_hash), None)

        wanted = strip_version_prefix(version)
        return next(
            (r for r in self.releases if strip_version_prefix(r.version) == wanted),
            None,
        )

    def archive_url(self, release: Release) -> str:
        return f"{self.base_url}/{release.archive}"


@dataclass(frozen=True)
class SdkInfo:
    """
    Resolved SDK to install.

    Attributes:
        version: Cache version key, e.g. "3.13.0-stable"
        download_url: Absolute archive URL
    """

    version: str
    download_url: str


def strip_version_prefix(version: str) -> str:
    """Remove one leading "v" from a version string."""
    return version[1:] if version.startswith("v") else version


def normalize_version(version: str, channel: str) -> str:
    """
    Build the cache version key of a release.

    Strips one leading "v" and appends the channel.

    Example:
        >>> normalize_version("v1.12.13+hotfix.9", "stable")
        '1.12.13+hotfix.9-stable'
    """
    return f"{strip_version_prefix(version)}-{channel}"


def manifest_url(architecture: str, settings: Settings = DEFAULT_SETTINGS) -> str:
    """
    Get the release manifest URL for an architecture.

    Example:
        >>> manifest_url("linux")
        'https://storage.googleapis.com/flutter_infra/releases/releases_linux.json'
    """
    return settings.releases_url.format(arch=architecture)


def fetch_manifest(
    url: str, fetch_json: Callable[..., Any] = get_json, timeout: int = 30
) -> ReleaseManifest:
    """
    Fetch and parse a release manifest.

    Args:
        url: Manifest URL
        fetch_json: JSON fetcher, called as fetch_json(url, timeout=...)
        timeout: HTTP timeout in seconds

    Raises:
        DownloadError: If the manifest cannot be fetched
        ManifestError: If the manifest cannot be parsed
    """
    logger.info(f"Fetching Flutter releases from {url}")
    return ReleaseManifest.from_dict(fetch_json(url, timeout=timeout))


def resolve_sdk(
    channel: str,
    architecture: str,
    version: str,
    settings: Settings = DEFAULT_SETTINGS,
    fetch_json: Callable[..., Any] = get_json,
) -> SdkInfo:
    """
    Resolve a channel and version selector to a downloadable SDK.

    Args:
        channel: Release channel (e.g., "stable", "beta")
        architecture: "linux", "macos" or "windows"
        version: "latest" or a literal version (e.g., "3.13.0", "v1.12.13+hotfix.9")
        settings: Settings providing the manifest URL template and timeout
        fetch_json: JSON fetcher, injectable for tests

    Returns:
        SdkInfo with the channel-suffixed version and archive URL

    Raises:
        ReleaseNotFoundError: If no release matches
        DownloadError: If the manifest cannot be fetched
        ManifestError: If the manifest cannot be parsed

    Example:
        >>> info = resolve_sdk("stable", "linux", "latest")
        >>> info.version
        '3.13.0-stable'
    """
    request = InstallRequest(channel=channel, architecture=architecture, version=version)

    manifest = fetch_manifest(
        manifest_url(request.architecture, settings),
        fetch_json=fetch_json,
        timeout=settings.request_timeout,
    )

    release = manifest.find_release(request.channel, request.version)
    if release is None:
        raise ReleaseNotFoundError(request.channel, request.version, request.architecture)

    sdk_info = SdkInfo(
        version=normalize_version(release.version, request.channel),
        download_url=manifest.archive_url(release),
    )
    logger.debug(f"Resolved {request} to {sdk_info}")
    return sdk_info


__all__ = [
    "LATEST",
    "InstallRequest",
    "Release",
    "ReleaseManifest",
    "SdkInfo",
    "strip_version_prefix",
    "normalize_version",
    "manifest_url",
    "fetch_manifest",
    "resolve_sdk",
]
