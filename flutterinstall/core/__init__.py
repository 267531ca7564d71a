"""
Core functionality for flutterinstall.

This package contains the platform, HTTP, archive and tool cache modules
that the SDK installer builds on.
"""

from .platform import (
    detect_architecture,
    architecture_for_system,
    clear_platform_cache,
    SUPPORTED_ARCHITECTURES,
)

from .directory import (
    get_tools_dir,
    get_temp_dir,
)

from .download import (
    DownloadProgress,
    get_json,
    download_file,
    format_progress,
)

from .filesystem import (
    extract_archive,
    safe_rmtree,
)

from .tool_cache import ToolCache

from .exceptions import (
    FlutterInstallError,
    ConfigurationError,
    InputRequiredError,
    ManifestError,
    ReleaseNotFoundError,
    DownloadError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    ToolCacheError,
)

__all__ = [
    "detect_architecture",
    "architecture_for_system",
    "clear_platform_cache",
    "SUPPORTED_ARCHITECTURES",
    "get_tools_dir",
    "get_temp_dir",
    "DownloadProgress",
    "get_json",
    "download_file",
    "format_progress",
    "extract_archive",
    "safe_rmtree",
    "ToolCache",
    "FlutterInstallError",
    "ConfigurationError",
    "InputRequiredError",
    "ManifestError",
    "ReleaseNotFoundError",
    "DownloadError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "ToolCacheError",
]
