"""
Local tool cache for build agents.

Installs are stored under the agent's tools directory, one directory per
(tool, version, architecture):

    <tools_dir>/Flutter/3.13.0-stable/linux/
    <tools_dir>/Flutter/3.13.0-stable/linux.complete

The ``.complete`` marker is written only after the install has been fully
copied, so an interrupted copy is never reported as a cache hit. Entries
are never evicted here.

Usage:
    from flutterinstall.core.tool_cache import ToolCache

    cache = ToolCache()
    path = cache.find_local_tool("Flutter", "3.13.0-stable", "linux")
    if path is None:
        archive = cache.download_tool(url)
        extracted = cache.extract_archive(archive)
        cache.cache_directory(extracted, "Flutter", "3.13.0-stable", "linux")
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote, urlparse

from filelock import FileLock, Timeout as LockTimeout
from packaging.version import InvalidVersion, Version

from flutterinstall.core.directory import get_temp_dir, get_tools_dir
from flutterinstall.core.download import DownloadProgress, download_file
from flutterinstall.core.exceptions import ToolCacheError
from flutterinstall.core.filesystem import extract_archive, safe_rmtree

logger = logging.getLogger(__name__)

COMPLETE_MARKER_SUFFIX = ".complete"


def _version_sort_key(version: str):
    """
    Sort key for cached version directory names.

    Versions like '3.13.0-stable' are ordered by their numeric release part;
    names that do not parse sort before all parseable ones, alphabetically.
    """
    release = version.rsplit("-", 1)[0] if "-" in version else version
    try:
        return (1, Version(release), version)
    except InvalidVersion:
        return (0, Version("0"), version)


class ToolCache:
    """
    Finds, stores and materializes tools in the agent tool cache.

    Attributes:
        tools_dir: Root of the tool cache
        temp_dir: Scratch directory for downloads and extraction
    """

    def __init__(
        self,
        tools_dir: Optional[Path] = None,
        temp_dir: Optional[Path] = None,
        request_timeout: int = 30,
        lock_timeout: int = 300,
    ):
        """
        Initialize tool cache.

        Args:
            tools_dir: Cache root. If None, resolved from the environment.
            temp_dir: Scratch directory. If None, resolved from the environment.
            request_timeout: HTTP timeout in seconds for downloads
            lock_timeout: Seconds to wait for another writer of the same tool
        """
        self.tools_dir = get_tools_dir(tools_dir)
        self.temp_dir = get_temp_dir(temp_dir)
        self.request_timeout = request_timeout
        self.lock_timeout = lock_timeout

        logger.debug(
            f"Initialized tool cache at {self.tools_dir} (temp: {self.temp_dir})"
        )

    def _entry_path(self, tool_name: str, version: str, arch: str) -> Path:
        if not tool_name:
            raise ValueError("Tool name cannot be empty")
        if not version:
            raise ValueError("Version cannot be empty")
        if not arch:
            raise ValueError("Architecture cannot be empty")
        return self.tools_dir / tool_name / version / arch

    @staticmethod
    def _marker_path(entry: Path) -> Path:
        return entry.parent / f"{entry.name}{COMPLETE_MARKER_SUFFIX}"

    def find_local_tool(
        self, tool_name: str, version: str, arch: str
    ) -> Optional[Path]:
        """
        Find a completely cached tool.

        Args:
            tool_name: Tool name (e.g., "Flutter")
            version: Exact cached version (e.g., "3.13.0-stable")
            arch: Architecture identifier

        Returns:
            Path to the cached install, or None if absent or incomplete
        """
        entry = self._entry_path(tool_name, version, arch)

        if entry.is_dir() and self._marker_path(entry).is_file():
            logger.debug(f"Found tool in cache {tool_name} {version} {arch}")
            return entry

        logger.debug(f"Tool not in cache {tool_name} {version} {arch}")
        return None

    def find_local_tool_versions(self, tool_name: str, arch: str) -> List[str]:
        """
        List all completely cached versions of a tool.

        Args:
            tool_name: Tool name
            arch: Architecture identifier

        Returns:
            Versions sorted oldest to newest
        """
        tool_dir = self.tools_dir / tool_name
        if not tool_dir.is_dir():
            return []

        versions = [
            child.name
            for child in tool_dir.iterdir()
            if child.is_dir() and self.find_local_tool(tool_name, child.name, arch)
        ]
        return sorted(versions, key=_version_sort_key)

    def cache_directory(
        self, source_dir: Path, tool_name: str, version: str, arch: str
    ) -> Path:
        """
        Copy a directory into the cache, replacing any existing entry.

        Args:
            source_dir: Directory whose contents become the cached install
            tool_name: Tool name
            version: Version to cache under
            arch: Architecture identifier

        Returns:
            Path to the cached install

        Raises:
            ToolCacheError: If the source is missing, the copy fails or the
                cache lock cannot be acquired
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise ToolCacheError(f"Source directory not found: {source_dir}")

        entry = self._entry_path(tool_name, version, arch)
        marker = self._marker_path(entry)
        lock_path = self.tools_dir / tool_name / ".lock"
        lock_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Caching {tool_name}@{version} ({arch}) from {source_dir}")

        try:
            with FileLock(lock_path, timeout=self.lock_timeout):
                marker.unlink(missing_ok=True)
                if entry.exists():
                    safe_rmtree(entry, require_prefix=self.tools_dir)

                shutil.copytree(source_dir, entry, symlinks=True)
                marker.write_text("")
        except LockTimeout as e:
            raise ToolCacheError(
                f"Could not acquire tool cache lock after {self.lock_timeout}s. "
                f"Another process may be writing {tool_name}."
            ) from e
        except OSError as e:
            raise ToolCacheError(
                f"Failed to cache {tool_name}@{version} ({arch}): {e}"
            ) from e

        logger.debug(f"Cached {tool_name}@{version} ({arch}) at {entry}")
        return entry

    def download_tool(
        self,
        url: str,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ) -> Path:
        """
        Download a file into a fresh scratch directory.

        The file keeps its name from the URL so the archive format can be
        detected from it later.

        Args:
            url: URL to download
            progress_callback: Optional download progress callback

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the download fails
        """
        file_name = Path(unquote(urlparse(url).path)).name or "download"
        destination = self.temp_dir / uuid.uuid4().hex / file_name

        return download_file(
            url,
            destination,
            progress_callback=progress_callback,
            timeout=self.request_timeout,
        )

    def extract_archive(self, archive_path: Path) -> Path:
        """
        Extract an archive into a fresh scratch directory.

        Args:
            archive_path: Downloaded archive

        Returns:
            Directory containing the extracted files

        Raises:
            ArchiveExtractionError: If extraction fails
        """
        destination = self.temp_dir / uuid.uuid4().hex
        extract_archive(archive_path, destination)
        return destination


__all__ = [
    "COMPLETE_MARKER_SUFFIX",
    "ToolCache",
]
