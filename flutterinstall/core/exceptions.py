"""
Centralized exception hierarchy for flutterinstall.

Every error raised by the package derives from FlutterInstallError so the
task entry point can report any failure with a single handler.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class FlutterInstallError(Exception):
    """Base exception for all flutterinstall errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(FlutterInstallError):
    """Invalid settings file or task configuration."""

    pass


class InputRequiredError(ConfigurationError):
    """Raised when a required task input is missing or empty."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Input required: {name}")


# ============================================================================
# Release Resolution Exceptions
# ============================================================================


class ManifestError(FlutterInstallError):
    """Release manifest could not be parsed."""

    pass


class ReleaseNotFoundError(FlutterInstallError):
    """Raised when no release in the manifest matches the request."""

    def __init__(self, channel: str, version: str, architecture: str = ""):
        self.channel = channel
        self.version = version
        self.architecture = architecture
        msg = f"No Flutter release found for version '{version}' on channel '{channel}'"
        if architecture:
            msg += f" ({architecture})"
        super().__init__(msg)


# ============================================================================
# Download and Extraction Exceptions
# ============================================================================


class DownloadError(FlutterInstallError):
    """Exception raised when an HTTP request or download fails."""

    pass


class ArchiveExtractionError(FlutterInstallError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Tool Cache Exceptions
# ============================================================================


class ToolCacheError(FlutterInstallError):
    """Raised when the local tool cache cannot be read or written."""

    pass


__all__ = [
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
