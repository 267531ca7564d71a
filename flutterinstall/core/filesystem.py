"""
File system utilities for flutterinstall.

This module provides:
- Archive extraction (zip, tar.gz, tar.xz, tar.bz2) with traversal checks
- Safe directory removal

Flutter ships .zip archives for macOS and Windows and .tar.xz archives for
Linux, so the format is detected from the file name rather than assumed.
"""

import os
import shutil
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from flutterinstall.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    ToolCacheError,
    UnsupportedArchiveFormat,
)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Args:
        path: Path to check
        parent: Parent directory

    Returns:
        True if path is under parent directory

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Args:
        path: Member path from archive
        destination: Extraction destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract an archive to a destination directory.

    Automatically detects archive format and extracts safely.
    Validates all paths to prevent directory traversal attacks. Symbolic
    links in zip archives are recreated as links when their target stays
    inside the destination.

    Supported formats:
    - .zip
    - .tar.gz, .tgz
    - .tar.xz
    - .tar.bz2

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('flutter_linux_3.13.0-stable.tar.xz', '/tmp/flutter')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        elif archive_name.endswith(".tar.xz"):
            _extract_tar(archive_path, destination, "r:xz")
        elif archive_name.endswith((".tar.bz2", ".tbz2")):
            _extract_tar(archive_path, destination, "r:bz2")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                "Supported: .zip, .tar.gz, .tar.xz, .tar.bz2"
            )
    except ArchiveExtractionError:
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, restoring Unix permission bits and symlinks."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member.filename, destination)

        for member in members:
            unix_mode = member.external_attr >> 16

            if stat.S_ISLNK(unix_mode) and not IS_WINDOWS:
                _extract_zip_symlink(zf, member, destination)
                continue

            extracted = Path(zf.extract(member, destination))

            # zipfile drops the executable bit that flutter/bin/flutter needs
            mode = stat.S_IMODE(unix_mode) & 0o777
            if mode and not IS_WINDOWS and not member.is_dir():
                extracted.chmod(mode)


def _extract_zip_symlink(
    zf: zipfile.ZipFile, member: zipfile.ZipInfo, destination: Path
) -> None:
    """
    Recreate a symlink stored in a ZIP archive.

    The link target is stored as the member's data. macOS framework bundles
    in the Flutter SDK rely on links such as Versions/Current.

    Raises:
        InsecureArchiveError: If the link points outside destination
    """
    link_path = destination / member.filename.rstrip("/")
    target = zf.read(member).decode("utf-8")

    resolved_target = (link_path.parent / target).resolve()
    if not is_relative_to(resolved_target, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member.filename}' links outside the extraction "
            f"directory ('{target}'). Extraction has been blocked."
        )

    link_path.parent.mkdir(parents=True, exist_ok=True)
    if link_path.is_symlink() or link_path.exists():
        link_path.unlink()
    os.symlink(target, link_path)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        members = tar.getmembers()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        # For older Python, we've already validated paths above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        ToolCacheError: If deletion fails

    Example:
        >>> safe_rmtree('/opt/tools/Flutter/3.13.0-stable/linux', require_prefix='/opt/tools')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return  # Already gone, nothing to do

    if not path.is_dir():
        raise ToolCacheError(f"Path is not a directory: {path}")

    def handle_remove_readonly(func, failed_path, exc_info):
        """Clear the read-only flag Windows sets on some SDK files, then retry."""
        os.chmod(failed_path, stat.S_IWRITE)
        func(failed_path)

    try:
        if IS_WINDOWS:
            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise ToolCacheError(f"Failed to remove directory '{path}': {e}") from e


__all__ = [
    "is_relative_to",
    "extract_archive",
    "safe_rmtree",
]
